"""
Integration tests for /api/book and /api/save-book.
"""
import json
import os

from chronicle.core.config import settings
from conftest import FAKE_PDF


def _compile(client, **overrides):
    payload = {"title": "The Great War", "author": "A. Historian"}
    payload.update(overrides)
    return client.post("/api/book/compile", json=payload)


class TestCompileBook:

    def test_requires_title_and_author(self, client, rendered_html):
        response = client.post("/api/book/compile", json={"title": "Only title"})

        assert response.status_code == 400
        assert response.json() == {"error": "Title and author are required"}
        assert rendered_html == []

    def test_no_items_is_rejected(self, client, rendered_html, make_post):
        make_post(title="Unpublished", status="draft")

        response = _compile(client)

        assert response.status_code == 400
        assert response.json() == {"error": "No posts found matching the specified criteria"}
        assert rendered_html == []

    def test_unknown_manuscript_is_rejected(self, client, rendered_html):
        response = _compile(client, manuscriptId=12345)

        assert response.status_code == 400

    def test_published_posts_compile(self, client, rendered_html, make_post):
        make_post(title="Treaty Signed")

        response = _compile(client, pageSize="us-letter", template="academic")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        metadata = data["metadata"]
        assert data["downloadUrl"] == f"/books/{metadata['filename']}"
        assert metadata["filename"].startswith("The_Great_War_")
        assert metadata["filename"].endswith(".pdf")
        assert metadata["fileSize"] == len(FAKE_PDF)
        assert metadata["totalPosts"] == 1
        assert metadata["chapters"] == 1
        assert metadata["options"] == {
            "template": "academic",
            "pageSize": "us-letter",
            "fontSize": "medium",
            "includeImages": False,
        }
        [html] = rendered_html
        assert "size: 8.5in 11in;" in html
        assert "Historical Events" in html

    def test_pdf_written_and_served(self, client, rendered_html, make_post):
        make_post()

        data = _compile(client).json()

        path = os.path.join(settings.books_dir, data["metadata"]["filename"])
        with open(path, "rb") as handle:
            assert handle.read() == FAKE_PDF
        download = client.get(data["downloadUrl"])
        assert download.status_code == 200
        assert download.content == FAKE_PDF

    def test_unknown_page_size_falls_back(self, client, rendered_html, make_post):
        make_post()

        data = _compile(client, pageSize="b5").json()

        assert data["metadata"]["options"]["pageSize"] == "a4"
        assert "size: 210mm 297mm;" in rendered_html[0]

    def test_treaty_and_aftermath_manuscript(
        self, client, rendered_html, make_post, make_manuscript, make_section
    ):
        post = make_post(title="Treaty Signed", date="1919-06-28")
        manuscript = make_manuscript()
        make_section(manuscript["id"], "Treaty section", postId=post["id"], sortOrder=0)
        make_section(
            manuscript["id"], "Aftermath", content="Para one.\n\nPara two.", sortOrder=1
        )

        response = _compile(client, manuscriptId=manuscript["id"])

        assert response.status_code == 200
        assert response.json()["metadata"]["totalPosts"] == 2
        [html] = rendered_html
        assert '<div class="cover-page">' in html
        assert '<h1 class="cover-title">The Great War</h1>' in html
        assert '<div class="cover-author">by A. Historian</div>' in html
        assert html.count('class="toc-entry') == 1
        assert "Manuscript Content" in html
        assert html.index("Treaty Signed") < html.index("Aftermath")
        assert "June 28, 1919" in html
        assert "<p>Para one.</p><p>Para two.</p>" in html
        assert "Treaty section" not in html

    def test_pipeline_failure_returns_500(self, client, monkeypatch, make_post):
        from chronicle.services import pdf_service

        def broken(html):
            raise RuntimeError("renderer crashed")

        monkeypatch.setattr(pdf_service, "html_to_pdf", broken)
        make_post()

        response = _compile(client)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to compile book. Please try again."}


class TestCompileStatus:

    def test_requires_job_id(self, client):
        response = client.get("/api/book/compile")

        assert response.status_code == 400
        assert response.json() == {"error": "Job ID required"}

    def test_always_complete(self, client):
        response = client.get("/api/book/compile", params={"jobId": "anything"})

        assert response.status_code == 200
        assert response.json() == {
            "stage": "complete",
            "progress": 100,
            "message": "Compilation complete",
        }


class TestBookLayouts:

    def test_lists_layout_options(self, client):
        response = client.get("/api/book/layouts")

        assert response.status_code == 200
        data = response.json()
        assert {entry["key"] for entry in data["page_sizes"]} == {"a4", "us-letter", "a5", "6x9"}


class TestSaveBook:

    def test_missing_fields(self, client):
        response = client.post("/api/save-book", json={"title": "Final"})

        assert response.status_code == 400
        assert "Missing required fields" in response.json()["error"]

    def test_unknown_manuscript(self, client):
        response = client.post(
            "/api/save-book", json={"manuscriptId": 999, "title": "Final", "content": "x"}
        )

        assert response.status_code == 404

    def test_save_and_load(self, client, make_manuscript):
        manuscript = make_manuscript(title="Draft title")

        saved = client.post(
            "/api/save-book",
            json={
                "manuscriptId": manuscript["id"],
                "title": "Final Title",
                "content": "<h1>Final</h1>",
                "wordCount": 1200,
            },
        )

        assert saved.status_code == 200
        body = saved.json()
        assert body["success"] is True
        assert body["message"] == "Book saved successfully"
        assert body["manuscript"]["title"] == "Final Title"
        assert body["manuscript"]["status"] == "completed"
        assert body["manuscript"]["wordCount"] == 1200
        stored = json.loads(body["manuscript"]["settings"])
        assert stored["contentType"] == "compiled-book"
        assert stored["lastCompiled"] == body["savedAt"]

        loaded = client.get("/api/save-book", params={"manuscriptId": manuscript["id"]})

        assert loaded.status_code == 200
        data = loaded.json()
        assert data["hasSavedContent"] is True
        assert data["savedBookContent"] == "<h1>Final</h1>"
        assert data["lastCompiled"] == body["savedAt"]

    def test_marker_section_appended(self, client, make_manuscript):
        manuscript = make_manuscript()
        client.post(
            "/api/save-book",
            json={"manuscriptId": manuscript["id"], "title": "Final", "content": "Body"},
        )

        sections = client.get(f"/api/manuscripts/{manuscript['id']}/sections").json()

        [marker] = sections
        assert marker["title"] == "Final - Compiled Book"
        assert marker["sortOrder"] == 9999
        assert marker["includeInCompile"] is False
        assert marker["status"] == "completed"

    def test_load_without_saved_content(self, client, make_manuscript):
        manuscript = make_manuscript()

        data = client.get("/api/save-book", params={"manuscriptId": manuscript["id"]}).json()

        assert data["hasSavedContent"] is False
        assert data["savedBookContent"] is None

    def test_load_with_unparseable_settings(self, client, db, make_manuscript):
        from chronicle.models import Manuscript

        manuscript = make_manuscript()
        row = db.get(Manuscript, manuscript["id"])
        row.settings = "{not json"
        db.commit()

        data = client.get("/api/save-book", params={"manuscriptId": manuscript["id"]}).json()

        assert data["success"] is True
        assert data["hasSavedContent"] is False

    def test_load_requires_manuscript_id(self, client):
        response = client.get("/api/save-book")

        assert response.status_code == 400
