"""
Integration tests for posts, taxonomy and image endpoints.
"""


def _category(client, name="Diplomacy", type_="event_type"):
    response = client.post("/api/categories", json={"name": name, "type": type_})
    assert response.status_code == 201, response.text
    return response.json()


def _tag(client, name="Versailles"):
    response = client.post("/api/tags", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()


class TestPosts:

    def test_create_derives_slug_and_year(self, make_post):
        post = make_post(title="Treaty Signed, At Last!", date="1919-06-28", status="draft")

        assert post["slug"] == "treaty-signed-at-last"
        assert post["yearOfEvent"] == 1919
        assert post["status"] == "draft"

    def test_duplicate_titles_get_distinct_slugs(self, make_post):
        first = make_post(title="Armistice")
        second = make_post(title="Armistice")

        assert first["slug"] == "armistice"
        assert second["slug"] == "armistice-2"

    def test_invalid_event_date(self, client):
        response = client.post(
            "/api/posts",
            json={"title": "Bad", "content": "c", "excerpt": "e", "dateOfEvent": "sometime"},
        )

        assert response.status_code == 400
        assert "dateOfEvent" in response.json()["error"]

    def test_missing_fields_is_bad_request(self, client):
        response = client.post("/api/posts", json={"title": "No body"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request"
        assert body["details"]

    def test_list_search_and_status(self, client, make_post):
        make_post(title="Treaty Signed", status="published")
        make_post(title="Treaty Drafted", status="draft")
        make_post(title="Armistice", status="published")

        titles = [row["title"] for row in client.get("/api/posts", params={"search": "Treaty"}).json()]
        published = client.get("/api/posts", params={"status": "published"}).json()

        assert sorted(titles) == ["Treaty Drafted", "Treaty Signed"]
        assert {row["status"] for row in published} == {"published"}
        assert len(published) == 2

    def test_list_pagination(self, client, make_post):
        for index in range(5):
            make_post(title=f"Event {index}")

        page = client.get("/api/posts", params={"limit": 2, "offset": 1}).json()

        assert len(page) == 2

    def test_detail_includes_links_and_images(self, client, make_post):
        category = _category(client)
        tag = _tag(client)
        post = make_post(categoryIds=[category["id"]], tagIds=[tag["id"]])
        client.post(
            "/api/images",
            json={
                "postId": post["id"],
                "filename": "treaty.jpg",
                "originalName": "Treaty.JPG",
                "size": 2048,
                "mimeType": "image/jpeg",
                "caption": "Hall of Mirrors",
            },
        )

        detail = client.get(f"/api/posts/{post['id']}").json()

        assert [row["name"] for row in detail["categories"]] == ["Diplomacy"]
        assert [row["name"] for row in detail["tags"]] == ["Versailles"]
        [image] = detail["images"]
        assert image["url"] == "/uploads/treaty.jpg"
        assert image["caption"] == "Hall of Mirrors"

    def test_unknown_post_is_404(self, client):
        response = client.get("/api/posts/999")

        assert response.status_code == 404
        assert response.json() == {"error": "Post not found."}

    def test_put_replaces_links(self, client, make_post):
        first = _category(client, name="Diplomacy")
        second = _category(client, name="Europe", type_="region")
        post = make_post(categoryIds=[first["id"]])

        response = client.put(
            f"/api/posts/{post['id']}",
            json={"title": "Treaty Ratified", "categoryIds": [second["id"]]},
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Treaty Ratified"
        detail = client.get(f"/api/posts/{post['id']}").json()
        assert [row["name"] for row in detail["categories"]] == ["Europe"]

    def test_patch_status_keeps_links_and_year(self, client, make_post):
        tag = _tag(client)
        post = make_post(status="draft", tagIds=[tag["id"]])

        response = client.patch(
            f"/api/posts/{post['id']}", json={"status": "published", "dateOfEvent": "1920-01-10"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "published"
        assert body["dateOfEvent"] == "1920-01-10"
        assert body["yearOfEvent"] == 1919
        assert len(client.get(f"/api/posts/{post['id']}").json()["tags"]) == 1

    def test_create_with_unknown_category_is_rejected(self, client):
        response = client.post(
            "/api/posts",
            json={
                "title": "Orphan",
                "content": "c",
                "excerpt": "e",
                "dateOfEvent": "1919-06-28",
                "categoryIds": [999],
            },
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Unknown category id(s): 999"}
        assert client.get("/api/posts").json() == []

    def test_update_with_unknown_tag_keeps_links(self, client, make_post):
        tag = _tag(client)
        post = make_post(tagIds=[tag["id"]])

        response = client.put(f"/api/posts/{post['id']}", json={"tagIds": [tag["id"], 998]})

        assert response.status_code == 400
        assert response.json() == {"error": "Unknown tag id(s): 998"}
        detail = client.get(f"/api/posts/{post['id']}").json()
        assert [row["id"] for row in detail["tags"]] == [tag["id"]]

    def test_delete_unlinks_sections(self, client, make_post, make_manuscript, make_section):
        post = make_post(title="Treaty Signed")
        manuscript = make_manuscript()
        section = make_section(manuscript["id"], "Treaty", postId=post["id"], content="Own text")

        response = client.delete(f"/api/posts/{post['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert client.get(f"/api/posts/{post['id']}").status_code == 404
        [remaining] = client.get(f"/api/manuscripts/{manuscript['id']}/sections").json()
        assert remaining["id"] == section["id"]
        assert remaining["postId"] is None
        assert remaining["title"] == "Treaty"
        assert remaining["content"] == "Own text"


class TestTaxonomy:

    def test_categories_ordered_by_type_then_name(self, client):
        _category(client, name="Western Front", type_="region")
        _category(client, name="Battle", type_="event_type")
        _category(client, name="Armistice", type_="event_type")

        names = [row["name"] for row in client.get("/api/categories").json()]

        assert names == ["Armistice", "Battle", "Western Front"]

    def test_category_slug_generated(self, client):
        category = _category(client, name="World War I")

        assert category["slug"] == "world-war-i"

    def test_duplicate_category(self, client):
        _category(client, name="Diplomacy")

        response = client.post("/api/categories", json={"name": "Diplomacy", "type": "era"})

        assert response.status_code == 400

    def test_invalid_category_type(self, client):
        response = client.post("/api/categories", json={"name": "X", "type": "planet"})

        assert response.status_code == 400

    def test_tags_ordered_and_deleted(self, client):
        zulu = _tag(client, name="Zulu")
        _tag(client, name="Alpha")

        assert [row["name"] for row in client.get("/api/tags").json()] == ["Alpha", "Zulu"]
        assert client.delete(f"/api/tags/{zulu['id']}").status_code == 200
        assert [row["name"] for row in client.get("/api/tags").json()] == ["Alpha"]
        assert client.delete(f"/api/tags/{zulu['id']}").status_code == 404

    def test_delete_category_drops_links(self, client, make_post):
        category = _category(client)
        post = make_post(categoryIds=[category["id"]])

        client.delete(f"/api/categories/{category['id']}")

        assert client.get(f"/api/posts/{post['id']}").json()["categories"] == []


class TestImages:

    def _image(self, client, post_id, filename="map.png"):
        response = client.post(
            "/api/images",
            json={
                "postId": post_id,
                "filename": filename,
                "originalName": filename,
                "size": 10,
                "mimeType": "image/png",
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    def test_list_requires_post_id(self, client):
        response = client.get("/api/images")

        assert response.status_code == 400

    def test_images_keep_insertion_order(self, client, make_post):
        post = make_post()
        self._image(client, post["id"], "first.png")
        self._image(client, post["id"], "second.png")

        rows = client.get("/api/images", params={"postId": post["id"]}).json()

        assert [row["filename"] for row in rows] == ["first.png", "second.png"]
        assert [row["sortOrder"] for row in rows] == [0, 1]

    def test_patch_and_delete(self, client, make_post):
        post = make_post()
        image = self._image(client, post["id"])

        patched = client.patch(f"/api/images/{image['id']}", json={"isHero": True, "alt": "Map"})

        assert patched.status_code == 200
        assert patched.json()["isHero"] is True
        assert patched.json()["alt"] == "Map"
        assert client.delete(f"/api/images/{image['id']}").status_code == 200
        assert client.delete(f"/api/images/{image['id']}").status_code == 404

    def test_image_for_unknown_post(self, client):
        response = client.post(
            "/api/images",
            json={
                "postId": 404,
                "filename": "x.png",
                "originalName": "x.png",
                "size": 1,
                "mimeType": "image/png",
            },
        )

        assert response.status_code == 404
