"""API tests for todos, posts and account administration: ownership, pagination and search."""

from tests.support import ApiTestCase


class ResourceTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.setup_admin()
        self.alice = self.register("alice@example.com", name="Alice")
        self.bob = self.register("bob@example.com", name="Bob")
        self.admin_headers = self.auth_headers("admin@example.com")
        self.alice_headers = self.auth_headers("alice@example.com")
        self.bob_headers = self.auth_headers("bob@example.com")

    def create_todo(self, headers: dict[str, str], title: str, **extra: object) -> dict:
        response = self.client.post(self.url("/todos"), headers=headers, json={"title": title, **extra})
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]

    def create_post(self, headers: dict[str, str], title: str = "Hello world") -> dict:
        response = self.client.post(
            self.url("/posts"), headers=headers, json={"title": title, "content": "Plenty of content here"}
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]


class TestTodoOwnership(ResourceTestCase):
    def test_owner_is_taken_from_the_token(self) -> None:
        todo = self.create_todo(self.alice_headers, "Buy milk", user_id=self.bob["id"])
        self.assertEqual(todo["user_id"], self.alice["id"])
        self.assertEqual(todo["user"]["name"], "Alice")
        self.assertFalse(todo["completed"])

    def test_other_users_todo_is_forbidden_but_admin_may(self) -> None:
        todo = self.create_todo(self.alice_headers, "Private")
        path = self.url(f"/todos/{todo['id']}")
        self.assertEqual(self.client.get(path, headers=self.bob_headers).status_code, 403)
        self.assertEqual(self.client.put(path, headers=self.bob_headers, json={"completed": True}).status_code, 403)
        self.assertEqual(self.client.delete(path, headers=self.bob_headers).status_code, 403)

        updated = self.client.put(path, headers=self.admin_headers, json={"completed": True})
        self.assertEqual(updated.status_code, 200)
        self.assertTrue(updated.json()["data"]["completed"])
        self.assertEqual(self.client.delete(path, headers=self.admin_headers).status_code, 200)
        self.assertEqual(self.client.get(path, headers=self.admin_headers).status_code, 404)

    def test_partial_update_and_clearing_description(self) -> None:
        todo = self.create_todo(self.alice_headers, "Write report", description="draft first")
        path = self.url(f"/todos/{todo['id']}")
        renamed = self.client.put(path, headers=self.alice_headers, json={"title": "Write final report"}).json()["data"]
        self.assertEqual(renamed["description"], "draft first")
        cleared = self.client.put(path, headers=self.alice_headers, json={"description": None}).json()["data"]
        self.assertIsNone(cleared["description"])
        self.assertEqual(cleared["title"], "Write final report")

    def test_list_scope_pagination_and_search(self) -> None:
        for i in range(3):
            self.create_todo(self.alice_headers, f"alice task {i}")
        self.create_todo(self.alice_headers, "groceries", description="100% organic")
        self.create_todo(self.bob_headers, "bob task")

        page = self.client.get(self.url("/todos"), headers=self.alice_headers, params={"limit": 2, "page": 2})
        body = page.json()
        self.assertEqual(body["meta"], {"page": 2, "limit": 2, "total": 4, "total_pages": 2, "search": None})
        self.assertEqual(len(body["data"]), 2)
        self.assertTrue(all(item["user_id"] == self.alice["id"] for item in body["data"]))

        everyone = self.client.get(self.url("/todos"), headers=self.admin_headers).json()
        self.assertEqual(everyone["meta"]["total"], 5)

        found = self.client.get(self.url("/todos"), headers=self.alice_headers, params={"search": "100%"}).json()
        self.assertEqual([item["title"] for item in found["data"]], ["groceries"])
        self.assertEqual(found["meta"]["search"], "100%")

        wildcard = self.client.get(self.url("/todos"), headers=self.alice_headers, params={"search": "_"}).json()
        self.assertEqual(wildcard["meta"]["total"], 0)

    def test_list_newest_first(self) -> None:
        first = self.create_todo(self.alice_headers, "first")
        second = self.create_todo(self.alice_headers, "second")
        items = self.client.get(self.url("/todos"), headers=self.alice_headers).json()["data"]
        self.assertEqual([item["id"] for item in items], [second["id"], first["id"]])

    def test_pagination_bounds(self) -> None:
        for params in ({"limit": 0}, {"limit": 101}, {"page": 0}):
            with self.subTest(params=params):
                response = self.client.get(self.url("/todos"), headers=self.alice_headers, params=params)
                self.assertEqual(response.status_code, 422)

    def test_empty_title_is_rejected(self) -> None:
        response = self.client.post(self.url("/todos"), headers=self.alice_headers, json={"title": ""})
        self.assertEqual(response.status_code, 422)

    def test_missing_todo(self) -> None:
        response = self.client.get(self.url("/todos/9999"), headers=self.alice_headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Todo not found")


class TestPosts(ResourceTestCase):
    def test_post_crud_and_ownership(self) -> None:
        post = self.create_post(self.alice_headers)
        self.assertEqual(post["author"]["email"], "alice@example.com")
        self.assertEqual(post["attachments"], [])
        self.assertFalse(post["published"])
        path = self.url(f"/posts/{post['id']}")

        self.assertEqual(self.client.get(path, headers=self.bob_headers).status_code, 403)
        published = self.client.put(path, headers=self.alice_headers, json={"published": True})
        self.assertTrue(published.json()["data"]["published"])
        self.assertEqual(published.json()["data"]["title"], "Hello world")

        listed = self.client.get(self.url("/posts"), headers=self.bob_headers).json()
        self.assertEqual(listed["meta"]["total"], 0)
        self.assertEqual(self.client.delete(path, headers=self.alice_headers).status_code, 200)
        self.assertEqual(self.client.get(path, headers=self.alice_headers).status_code, 404)

    def test_post_validation(self) -> None:
        response = self.client.post(
            self.url("/posts"), headers=self.alice_headers, json={"title": "Hi", "content": "short"}
        )
        self.assertEqual(response.status_code, 422)

    def test_search_matches_content(self) -> None:
        self.create_post(self.alice_headers, title="Gardening notes")
        self.create_post(self.alice_headers, title="Another entry")
        found = self.client.get(self.url("/posts"), headers=self.alice_headers, params={"search": "GARDEN"}).json()
        self.assertEqual([p["title"] for p in found["data"]], ["Gardening notes"])


class TestUserAdministration(ResourceTestCase):
    def test_non_admin_is_forbidden(self) -> None:
        self.assertEqual(self.client.get(self.url("/users"), headers=self.alice_headers).status_code, 403)
        self.assertEqual(
            self.client.delete(self.url(f"/users/{self.bob['id']}"), headers=self.alice_headers).status_code, 403
        )

    def test_list_and_detail(self) -> None:
        self.create_todo(self.alice_headers, "one")
        listed = self.client.get(self.url("/users"), headers=self.admin_headers, params={"role": "USER"}).json()
        self.assertEqual(listed["meta"]["total"], 2)
        counts = {item["email"]: item["todo_count"] for item in listed["data"]}
        self.assertEqual(counts, {"alice@example.com": 1, "bob@example.com": 0})

        detail = self.client.get(self.url(f"/users/{self.alice['id']}"), headers=self.admin_headers).json()["data"]
        self.assertEqual(detail["todo_count"], 1)
        self.assertEqual([t["title"] for t in detail["recent_todos"]], ["one"])

    def test_create_and_change_role(self) -> None:
        created = self.client.post(
            self.url("/users"),
            headers=self.admin_headers,
            json={"email": "mod@example.com", "password": "secret123", "name": "Mod", "role": "MODERATOR"},
        )
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["data"]["role"], "MODERATOR")

        promoted = self.client.patch(
            self.url(f"/users/{self.bob['id']}/role"), headers=self.admin_headers, json={"role": "ADMIN"}
        )
        self.assertEqual(promoted.json()["data"]["role"], "ADMIN")
        # Role is read from the account, so Bob's existing token now carries admin rights.
        self.assertEqual(self.client.get(self.url("/users"), headers=self.bob_headers).status_code, 200)

        invalid = self.client.patch(
            self.url(f"/users/{self.bob['id']}/role"), headers=self.admin_headers, json={"role": "ROOT"}
        )
        self.assertEqual(invalid.status_code, 422)

    def test_delete_rules(self) -> None:
        own = self.client.delete(self.url(f"/users/{self.admin['id']}"), headers=self.admin_headers)
        self.assertEqual(own.status_code, 403)
        self.create_todo(self.bob_headers, "bob's")
        self.assertEqual(
            self.client.delete(self.url(f"/users/{self.bob['id']}"), headers=self.admin_headers).status_code, 200
        )
        self.assertEqual(
            self.client.get(self.url(f"/users/{self.bob['id']}"), headers=self.admin_headers).status_code, 404
        )
        self.assertEqual(self.client.get(self.url("/todos"), headers=self.admin_headers).json()["meta"]["total"], 0)
        self.assertEqual(self.client.get(self.url("/auth/profile"), headers=self.bob_headers).status_code, 401)
