from conftest import JOB_PAYLOAD, create_job


class TestJobsCRUD:
    def test_create_job(self, client, admin):
        r = client.post("/api/jobs", json={
            **JOB_PAYLOAD,
            "salary": "$100k",
            "skills": ["React", "TypeScript"],
            "experience": "senior",
            "category": "Engineering",
        }, headers=admin["headers"])
        assert r.status_code == 201
        data = r.json()
        assert data["title"] == "Senior React Developer"
        assert data["company"] == "Acme Corp"
        assert data["isActive"] is True
        assert data["applicationCount"] == 0
        assert data["skills"] == ["React", "TypeScript"]
        assert data["postedBy"]["id"] == admin["user"]["id"]
        assert data["postedBy"]["email"] == "bob@example.com"
        assert len(data["id"]) == 24

    def test_create_job_multipart_with_logo(self, client, admin, settings):
        r = client.post(
            "/api/jobs",
            data={**JOB_PAYLOAD, "skills": "Python, FastAPI"},
            files={"companyLogo": ("logo.png", b"\x89PNG fake image", "image/png")},
            headers=admin["headers"],
        )
        assert r.status_code == 201
        data = r.json()
        assert data["skills"] == ["Python", "FastAPI"]
        assert data["companyLogo"].endswith(".png")
        assert (settings.upload_dir / data["companyLogo"]).read_bytes() == b"\x89PNG fake image"

        served = client.get(f"/uploads/{data['companyLogo']}")
        assert served.status_code == 200
        assert served.content == b"\x89PNG fake image"

    def test_create_job_rejects_invalid_type(self, client, admin):
        r = client.post("/api/jobs", json={**JOB_PAYLOAD, "type": "permanent"}, headers=admin["headers"])
        assert r.status_code == 400
        assert r.json()["message"].startswith("Validation error")

    def test_create_job_requires_fields(self, client, admin):
        r = client.post("/api/jobs", json={"title": "Incomplete"}, headers=admin["headers"])
        assert r.status_code == 400

    def test_create_job_rejects_oversized_logo(self, client, admin, app, settings):
        app.state.settings = settings.model_copy(update={"max_upload_bytes": 8})
        r = client.post(
            "/api/jobs",
            data=JOB_PAYLOAD,
            files={"companyLogo": ("logo.png", b"0123456789abcdef", "image/png")},
            headers=admin["headers"],
        )
        assert r.status_code == 413

    def test_get_job(self, client, job):
        r = client.get(f"/api/jobs/{job['id']}")
        assert r.status_code == 200
        assert r.json()["title"] == job["title"]

    def test_get_missing_job(self, client):
        r = client.get("/api/jobs/0123456789abcdef01234567")
        assert r.status_code == 404
        assert r.json()["message"] == "Job not found"

    def test_update_job(self, client, admin, job):
        r = client.put(f"/api/jobs/{job['id']}", json={"title": "Staff React Developer"}, headers=admin["headers"])
        assert r.status_code == 200
        data = r.json()
        assert data["title"] == "Staff React Developer"
        assert data["company"] == job["company"]

    def test_update_job_keeps_logo_without_new_file(self, client, admin):
        created = client.post(
            "/api/jobs",
            data=JOB_PAYLOAD,
            files={"companyLogo": ("logo.png", b"logo", "image/png")},
            headers=admin["headers"],
        ).json()
        r = client.put(f"/api/jobs/{created['id']}", data={"location": "Berlin"}, headers=admin["headers"])
        assert r.status_code == 200
        assert r.json()["companyLogo"] == created["companyLogo"]
        assert r.json()["location"] == "Berlin"

    def test_update_job_validates_fields(self, client, admin, job):
        r = client.put(f"/api/jobs/{job['id']}", json={"type": "gig"}, headers=admin["headers"])
        assert r.status_code == 400

    def test_update_missing_job(self, client, admin):
        r = client.put("/api/jobs/0123456789abcdef01234567", json={"title": "x"}, headers=admin["headers"])
        assert r.status_code == 404

    def test_delete_job(self, client, admin, job):
        r = client.delete(f"/api/jobs/{job['id']}", headers=admin["headers"])
        assert r.status_code == 200

        r = client.get(f"/api/jobs/{job['id']}")
        assert r.status_code == 404

    def test_delete_missing_job(self, client, admin):
        r = client.delete("/api/jobs/0123456789abcdef01234567", headers=admin["headers"])
        assert r.status_code == 404


class TestJobsAccess:
    def test_create_requires_token(self, client):
        r = client.post("/api/jobs", json=JOB_PAYLOAD)
        assert r.status_code == 401

    def test_create_forbidden_for_regular_user(self, client, user):
        r = client.post("/api/jobs", json=JOB_PAYLOAD, headers=user["headers"])
        assert r.status_code == 403

    def test_update_forbidden_for_regular_user(self, client, user, job):
        r = client.put(f"/api/jobs/{job['id']}", json={"title": "Hacked"}, headers=user["headers"])
        assert r.status_code == 403

    def test_delete_forbidden_for_regular_user(self, client, user, job):
        r = client.delete(f"/api/jobs/{job['id']}", headers=user["headers"])
        assert r.status_code == 403

    def test_listing_is_public(self, client, job):
        r = client.get("/api/jobs")
        assert r.status_code == 200
        assert r.json()["total"] == 1


class TestJobsListing:
    def test_list_jobs_pagination(self, client, admin):
        for i in range(5):
            create_job(client, admin["headers"], title=f"Job {i}")

        r = client.get("/api/jobs?page=1&limit=2")
        data = r.json()
        assert data["total"] == 5
        assert data["totalPages"] == 3
        assert data["currentPage"] == 1
        assert len(data["jobs"]) == 2
        # Newest first
        assert data["jobs"][0]["title"] == "Job 4"

        r = client.get("/api/jobs?page=3&limit=2")
        assert [j["title"] for j in r.json()["jobs"]] == ["Job 0"]

    def test_search_matches_title_company_description(self, client, admin):
        create_job(client, admin["headers"], title="REACT Engineer", company="One", description="Frontend")
        create_job(client, admin["headers"], title="Engineer", company="Reactive Labs", description="Backend")
        create_job(client, admin["headers"], title="Designer", company="Two", description="Uses react daily")
        create_job(client, admin["headers"], title="Accountant", company="Three", description="Spreadsheets")

        r = client.get("/api/jobs?search=react")
        data = r.json()
        assert data["total"] == 3
        for j in data["jobs"]:
            haystack = " ".join([j["title"], j["company"], j["description"]]).lower()
            assert "react" in haystack

    def test_search_treats_wildcards_literally(self, client, admin):
        create_job(client, admin["headers"], title="Engineer")
        r = client.get("/api/jobs?search=%25")
        assert r.json()["total"] == 0

    def test_filter_by_location_type_category(self, client, admin):
        create_job(client, admin["headers"], location="New York, NY", type="full-time", category="Engineering")
        create_job(client, admin["headers"], location="Remote", type="contract", category="Design")

        assert client.get("/api/jobs?location=new york").json()["total"] == 1
        assert client.get("/api/jobs?type=contract").json()["total"] == 1
        assert client.get("/api/jobs?category=engineer").json()["total"] == 1
        assert client.get("/api/jobs?type=internship").json()["total"] == 0

    def test_filter_rejects_unknown_type(self, client):
        r = client.get("/api/jobs?type=gig")
        assert r.status_code == 400

    def test_inactive_jobs_hidden(self, client, admin, job):
        client.put(f"/api/jobs/{job['id']}", json={"isActive": False}, headers=admin["headers"])
        r = client.get("/api/jobs")
        assert r.json()["total"] == 0
        # Still readable directly
        assert client.get(f"/api/jobs/{job['id']}").status_code == 200

    def test_stats(self, client, admin, user):
        first = create_job(client, admin["headers"], company="Acme")
        create_job(client, admin["headers"], company="Acme")
        create_job(client, admin["headers"], company="Globex")
        client.post(f"/api/jobs/{first['id']}/apply", json={"coverLetter": "Hi"}, headers=user["headers"])

        r = client.get("/api/jobs/stats")
        assert r.status_code == 200
        assert r.json() == {"totalJobs": 3, "totalCompanies": 2, "totalApplications": 1}

    def test_blank_filters_and_large_page_size(self, client, admin):
        for i in range(3):
            create_job(client, admin["headers"], title=f"Job {i}")

        r = client.get("/api/jobs?limit=1000&search=&location=&type=&category=")
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 3
        assert data["totalPages"] == 1
        assert len(data["jobs"]) == 3

    def test_page_size_upper_bound(self, client):
        assert client.get("/api/jobs?limit=1001").status_code == 400

    def test_huge_page_number_rejected(self, client):
        r = client.get("/api/jobs", params={"page": 10**19})
        assert r.status_code == 400
        assert r.json()["message"].startswith("Validation error")

    def test_last_allowed_page_is_empty(self, client, job):
        r = client.get("/api/jobs", params={"page": 1_000_000, "limit": 1000})
        assert r.status_code == 200
        assert r.json()["jobs"] == []


class TestJobsRequestBody:
    def _post(self, client, admin, body):
        headers = {**admin["headers"], "Content-Type": "application/json"}
        return client.post("/api/jobs", content=body, headers=headers)

    def test_malformed_json(self, client, admin):
        r = self._post(client, admin, b'{"title": ')
        assert r.status_code == 400
        assert r.json()["message"] == "Malformed JSON body"

    def test_json_must_be_object(self, client, admin):
        r = self._post(client, admin, b'["title"]')
        assert r.status_code == 400
        assert r.json()["message"] == "Request body must be a JSON object"

    def test_empty_body_is_validated(self, client, admin):
        r = self._post(client, admin, b"")
        assert r.status_code == 400
        assert r.json()["message"].startswith("Validation error")
