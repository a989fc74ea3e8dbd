"""API tests for post attachments: multipart upload limits, deletion and cascade cleanup."""

from app.models import PostAttachment
from app.services.attachments import MAX_FILE_SIZE
from tests.support import ApiTestCase


class UploadTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.setup_admin()
        self.register("alice@example.com", name="Alice")
        self.register("bob@example.com", name="Bob")
        self.admin_headers = self.auth_headers("admin@example.com")
        self.alice_headers = self.auth_headers("alice@example.com")
        self.bob_headers = self.auth_headers("bob@example.com")
        response = self.client.post(
            self.url("/posts"),
            headers=self.alice_headers,
            json={"title": "With files", "content": "A post that carries attachments"},
        )
        self.post = response.json()["data"]
        self.files_url = self.url(f"/posts/{self.post['id']}/files")
        self.post_dir = self.upload_dir / "posts" / str(self.post["id"])

    def upload(self, files: list[tuple[str, bytes, str]], headers: dict[str, str] | None = None):
        parts = [("files", (name, data, content_type)) for name, data, content_type in files]
        return self.client.post(self.files_url, headers=headers or self.alice_headers, files=parts)

    def attachment_count(self) -> int:
        self.db.expire_all()
        return self.db.query(PostAttachment).count()


class TestUpload(UploadTestCase):
    def test_upload_and_list_on_post(self) -> None:
        response = self.upload([("notes.txt", b"hello", "text/plain"), ("photo.png", b"\x89PNG", "image/png")])
        self.assertEqual(response.status_code, 201, response.text)
        created = response.json()["data"]
        self.assertEqual([a["original_name"] for a in created], ["notes.txt", "photo.png"])
        self.assertRegex(created[0]["stored_name"], r"^notes-[0-9a-f]{2}\.txt$")
        self.assertEqual(created[1]["size"], 4)
        for attachment in created:
            self.assertTrue((self.upload_dir / attachment["path"]).is_file())

        post = self.client.get(self.url(f"/posts/{self.post['id']}"), headers=self.alice_headers).json()["data"]
        self.assertEqual([a["id"] for a in post["attachments"]], [a["id"] for a in created])

    def test_eleven_files_are_rejected_whole(self) -> None:
        response = self.upload([(f"{i}.txt", b"x", "text/plain") for i in range(11)])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.attachment_count(), 0)
        self.assertFalse(self.post_dir.exists())

    def test_executable_mime_type_is_rejected(self) -> None:
        response = self.upload([("ok.txt", b"fine", "text/plain"), ("run.exe", b"MZ", "application/x-msdownload")])
        self.assertEqual(response.status_code, 400)
        self.assertIn("unsupported type", response.json()["message"])
        self.assertEqual(self.attachment_count(), 0)

    def test_oversized_image_is_rejected(self) -> None:
        response = self.upload([("big.png", b"\0" * (6 * 1024 * 1024), "image/png")])
        self.assertEqual(response.status_code, 400)
        self.assertIn("exceeds maximum size", response.json()["message"])
        self.assertEqual(self.attachment_count(), 0)

    def test_file_at_the_limit_is_accepted(self) -> None:
        response = self.upload([("edge.pdf", b"\0" * MAX_FILE_SIZE, "application/pdf")])
        self.assertEqual(response.status_code, 201, response.text)
        self.assertEqual(response.json()["data"][0]["size"], MAX_FILE_SIZE)

    def test_no_files(self) -> None:
        response = self.client.post(self.files_url, headers=self.alice_headers, data={"note": "nothing"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "No files provided")

    def test_only_owner_or_admin_may_upload(self) -> None:
        forbidden = self.upload([("a.txt", b"x", "text/plain")], headers=self.bob_headers)
        self.assertEqual(forbidden.status_code, 403)
        allowed = self.upload([("a.txt", b"x", "text/plain")], headers=self.admin_headers)
        self.assertEqual(allowed.status_code, 201)

    def test_missing_post(self) -> None:
        response = self.client.post(
            self.url("/posts/9999/files"),
            headers=self.alice_headers,
            files=[("files", ("a.txt", b"x", "text/plain"))],
        )
        self.assertEqual(response.status_code, 404)


class TestAttachmentDeletion(UploadTestCase):
    def setUp(self) -> None:
        super().setUp()
        created = self.upload([("a.txt", b"A", "text/plain"), ("b.txt", b"B", "text/plain")]).json()["data"]
        self.first, self.second = created

    def test_delete_one_removes_record_and_payload(self) -> None:
        path = self.url(f"/posts/{self.post['id']}/files/{self.first['id']}")
        self.assertEqual(self.client.delete(path, headers=self.bob_headers).status_code, 403)
        self.assertEqual(self.client.delete(path, headers=self.alice_headers).status_code, 200)
        self.assertFalse((self.upload_dir / self.first["path"]).exists())
        self.assertTrue((self.upload_dir / self.second["path"]).exists())
        self.assertEqual(self.client.delete(path, headers=self.alice_headers).status_code, 404)

    def test_missing_payload_is_not_an_error(self) -> None:
        (self.upload_dir / self.first["path"]).unlink()
        path = self.url(f"/posts/{self.post['id']}/files/{self.first['id']}")
        self.assertEqual(self.client.delete(path, headers=self.alice_headers).status_code, 200)
        self.assertEqual(self.attachment_count(), 1)

    def test_attachment_must_belong_to_post_in_path(self) -> None:
        other = self.client.post(
            self.url("/posts"),
            headers=self.alice_headers,
            json={"title": "Other post", "content": "Content for the other post"},
        ).json()["data"]
        response = self.client.delete(
            self.url(f"/posts/{other['id']}/files/{self.first['id']}"), headers=self.alice_headers
        )
        self.assertEqual(response.status_code, 404)

    def test_post_delete_cascades(self) -> None:
        self.assertTrue(self.post_dir.exists())
        response = self.client.delete(self.url(f"/posts/{self.post['id']}"), headers=self.alice_headers)
        self.assertEqual(response.status_code, 200)
        self.assertFalse(self.post_dir.exists())
        self.assertEqual(self.attachment_count(), 0)
