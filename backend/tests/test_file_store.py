"""
Tests for output file naming and image location mapping.
"""
import os
from pathlib import Path
from urllib.parse import urljoin

from chronicle.core.config import settings
from chronicle.utils.file_store import image_url, local_upload_url, new_book_filename


def _upload_uri(name):
    return Path(os.path.abspath(settings.uploads_dir), name).as_uri()


class TestBookFilename:

    def test_title_is_sanitised(self):
        filename = new_book_filename("The Great War: 1914/18")

        assert filename.startswith("The_Great_War__1914_18_")
        assert filename.endswith(".pdf")


class TestUploadLocation:

    def test_image_url_uses_prefix(self):
        assert image_url("map.jpg") == "/uploads/map.jpg"

    def test_root_relative_url_maps_into_uploads_dir(self):
        assert local_upload_url("/uploads/map.jpg") == _upload_uri("map.jpg")

    def test_url_resolved_against_public_dir_maps_into_uploads_dir(self):
        # the PDF renderer joins <img src> with the public dir as base
        base = Path(os.path.abspath(settings.public_dir)).as_uri() + "/"
        resolved = urljoin(base, image_url("map.jpg"))

        assert resolved == "file:///uploads/map.jpg"
        assert local_upload_url(resolved) == _upload_uri("map.jpg")

    def test_escaped_names_are_decoded(self):
        assert local_upload_url("/uploads/old%20map.jpg") == _upload_uri("old map.jpg")

    def test_other_urls_untouched(self):
        assert local_upload_url("https://example.org/map.jpg") == "https://example.org/map.jpg"
        assert local_upload_url("file:///etc/fonts/a.ttf") == "file:///etc/fonts/a.ttf"

    def test_uploaded_file_is_served(self, client):
        os.makedirs(settings.uploads_dir, exist_ok=True)
        with open(os.path.join(settings.uploads_dir, "seal.png"), "wb") as handle:
            handle.write(b"png-bytes")

        response = client.get(image_url("seal.png"))

        assert response.status_code == 200
        assert response.content == b"png-bytes"
