"""Tests for storage drivers and locator handling."""

import pytest

from app.config import Settings
from app.storage.base import StorageError
from app.storage.factory import get_storage_driver
from app.storage.local_driver import LocalStorageDriver
from app.storage.s3_driver import S3StorageDriver
from conftest import run


@pytest.fixture
def local_driver(tmp_path):
    return LocalStorageDriver(
        {
            "base_path": str(tmp_path),
            "bucket": "artworks",
            "public_base_url": "https://project.supabase.co",
        }
    )


class TestPublicLocators:
    """Tests for get_public_url / path_from_public_url."""

    @pytest.mark.parametrize(
        "path",
        [
            "thumbnails/sunset-study-123456.png",
            "html/a b-1.html",
            "previews/deep/nested/clip-000001.mp4",
        ],
    )
    def test_round_trip(self, local_driver, path):
        url = local_driver.get_public_url(path)
        assert local_driver.path_from_public_url(url) == path

    def test_locator_format(self, local_driver):
        assert local_driver.get_public_url("html/a-1.html") == (
            "https://project.supabase.co/storage/v1/object/public/artworks/html/a-1.html"
        )

    @pytest.mark.parametrize(
        "url",
        [
            None,
            "",
            "not a url",
            "ftp://project.supabase.co/storage/v1/object/public/artworks/a.png",
            "https://youtube.com/watch?v=abc",
            "https://project.supabase.co/storage/v1/object/public/artworks/",
            "http://[::1",
        ],
    )
    def test_foreign_urls_have_no_path(self, local_driver, url):
        assert local_driver.path_from_public_url(url) is None

    def test_bucket_segment_stripped(self, local_driver):
        url = "https://other.example/storage/v1/object/public/artworks/thumbnails/x.jpg"
        assert local_driver.path_from_public_url(url) == "thumbnails/x.jpg"


class TestLocalStorageDriver:
    """Tests for LocalStorageDriver."""

    def test_put_and_exists(self, local_driver, tmp_path):
        run(local_driver.put_object("html/a-1.html", b"<html></html>", "text/html"))
        assert run(local_driver.object_exists("html/a-1.html"))
        assert (tmp_path / "artworks" / "html" / "a-1.html").read_bytes() == b"<html></html>"

    def test_overwrite_allowed_by_default(self, local_driver, tmp_path):
        run(local_driver.put_object("html/a-1.html", b"one"))
        run(local_driver.put_object("html/a-1.html", b"two"))
        assert (tmp_path / "artworks" / "html" / "a-1.html").read_bytes() == b"two"

    def test_no_overwrite_rejects_existing(self, local_driver):
        run(local_driver.put_object("html/a-1.html", b"one"))
        with pytest.raises(StorageError):
            run(local_driver.put_object("html/a-1.html", b"two", overwrite=False))

    def test_delete_ignores_missing(self, local_driver):
        run(local_driver.put_object("thumbnails/a.png", b"png"))
        failed = run(local_driver.delete_objects(["thumbnails/a.png", "thumbnails/missing.png"]))
        assert failed == []
        assert not run(local_driver.object_exists("thumbnails/a.png"))

    def test_path_traversal_rejected(self, local_driver):
        with pytest.raises(StorageError):
            run(local_driver.put_object("../escape.txt", b"x"))

    def test_connection(self, local_driver):
        assert run(local_driver.test_connection())


class TestFactory:
    """Tests for get_storage_driver."""

    def test_local(self, tmp_path):
        driver = get_storage_driver(
            Settings(storage_provider="local", storage_base_path=str(tmp_path))
        )
        assert isinstance(driver, LocalStorageDriver)
        assert driver.bucket == "artworks"

    def test_s3(self):
        driver = get_storage_driver(
            Settings(
                storage_provider="s3",
                aws_access_key_id="key",
                aws_secret_access_key="secret",
                s3_endpoint_url="https://project.supabase.co/storage/v1/s3",
            )
        )
        assert isinstance(driver, S3StorageDriver)
        assert driver.s3_config["endpoint_url"] == "https://project.supabase.co/storage/v1/s3"

    def test_s3_requires_credentials(self):
        with pytest.raises(StorageError):
            get_storage_driver(Settings(storage_provider="s3", aws_access_key_id=None))

    def test_unknown_provider(self):
        with pytest.raises(StorageError):
            get_storage_driver(Settings(storage_provider="dropbox"))
