"""Tests for the HTTP driver."""

import unittest

from fastapi.testclient import TestClient

from studium.api.rest_api import StudiumRestAPI
from studium.core.directory import Directory


class RestApiMixin:

    def setUp(self):
        self.directory = Directory()
        self.client = TestClient(StudiumRestAPI(self.directory).app)

    def register(self, role, username, name=None, password="pw"):
        response = self.client.post("/users", json={
            "name": name or username.capitalize(), "username": username,
            "password": password, "role": role
        })
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def create_course(self, teacher_id, name="Algebra", **extra):
        payload = {"name": name, "description": "Linear algebra", "teacher_id": teacher_id}
        payload.update(extra)
        response = self.client.post("/courses", json=payload)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()


class TestUsers(RestApiMixin, unittest.TestCase):

    def test_health(self):
        self.assertEqual(self.client.get("/health").json()["status"], "healthy")

    def test_register_and_login(self):
        bob = self.register("student", "bob")
        self.assertEqual(bob["role"], "student")
        response = self.client.post("/login", json={"username": "bob", "password": "pw"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["id"], bob["id"])

    def test_bad_login(self):
        self.register("student", "bob")
        response = self.client.post("/login", json={"username": "bob", "password": "px"})
        self.assertEqual(response.status_code, 401)

    def test_duplicate_username(self):
        self.register("student", "bob")
        response = self.client.post("/users", json={
            "name": "Bob", "username": "bob", "password": "x", "role": "teacher"
        })
        self.assertEqual(response.status_code, 409)
        self.assertEqual(len(self.directory.all_users()), 1)

    def test_unknown_role(self):
        response = self.client.post("/users", json={
            "name": "Jo", "username": "jo", "password": "x", "role": "janitor"
        })
        self.assertEqual(response.status_code, 400)

    def test_list_users_requires_admin(self):
        admin = self.register("admin", "root")
        bob = self.register("student", "bob")
        response = self.client.get("/users", params={"actor_id": admin["id"]})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([user["username"] for user in response.json()], ["root", "bob"])
        response = self.client.get("/users", params={"actor_id": bob["id"]})
        self.assertEqual(response.status_code, 403)
        response = self.client.get("/users", params={"actor_id": "missing"})
        self.assertEqual(response.status_code, 404)


class TestCourses(RestApiMixin, unittest.TestCase):

    def setUp(self):
        super().setUp()
        self.ana = self.register("teacher", "ana")
        self.bob = self.register("student", "bob")

    def grade_payload(self, grade, weight=1, teacher=None):
        return {"teacher_id": (teacher or self.ana)["id"], "student_id": self.bob["id"],
                "grade": grade, "weight": weight}

    def test_only_teachers_create_courses(self):
        response = self.client.post("/courses", json={
            "name": "Algebra", "description": "", "teacher_id": self.bob["id"]
        })
        self.assertEqual(response.status_code, 403)

    def test_reference_scenario(self):
        course = self.create_course(self.ana["id"])
        url = f"/courses/{course['id']}"
        response = self.client.post(f"{url}/enrollments", json={"student_id": self.bob["id"]})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["enrolled_students"], [self.bob["id"]])
        for grade in (80, 100):
            response = self.client.post(f"{url}/grades", json={
                "teacher_id": self.ana["id"], "student_id": self.bob["id"], "grade": grade, "weight": 1
            })
            self.assertEqual(response.status_code, 201)
        response = self.client.get(f"{url}/students/{self.bob['id']}/final-grade")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["final_grade"], 90.0)
        self.assertEqual(response.json()["grading_strategy"], "unweighted_mean")

        results = self.client.get(f"/students/{self.bob['id']}/results").json()
        self.assertEqual(results, [{"course": "Algebra", "final_grade": 90.0}])

    def test_double_enrollment_conflict(self):
        course = self.create_course(self.ana["id"])
        url = f"/courses/{course['id']}/enrollments"
        self.client.post(url, json={"student_id": self.bob["id"]})
        response = self.client.post(url, json={"student_id": self.bob["id"]})
        self.assertEqual(response.status_code, 409)

    def test_grade_for_non_enrolled_student(self):
        course = self.create_course(self.ana["id"])
        response = self.client.post(f"/courses/{course['id']}/grades", json={
            "teacher_id": self.ana["id"], "student_id": self.bob["id"], "grade": 50
        })
        self.assertEqual(response.status_code, 404)
        response = self.client.get(f"/courses/{course['id']}/students/{self.bob['id']}/final-grade")
        self.assertEqual(response.status_code, 404)

    def test_negative_weight_rejected(self):
        course = self.create_course(self.ana["id"])
        self.client.post(f"/courses/{course['id']}/enrollments", json={"student_id": self.bob["id"]})
        response = self.client.post(f"/courses/{course['id']}/grades", json={
            "teacher_id": self.ana["id"], "student_id": self.bob["id"], "grade": 50, "weight": -1
        })
        self.assertEqual(response.status_code, 422)

    def test_weighted_strategy(self):
        course = self.create_course(self.ana["id"], grading_strategy="weighted_mean")
        url = f"/courses/{course['id']}"
        self.client.post(f"{url}/enrollments", json={"student_id": self.bob["id"]})
        self.client.post(f"{url}/grades", json=self.grade_payload(60, 1))
        self.client.post(f"{url}/grades", json=self.grade_payload(90, 2))
        final = self.client.get(f"{url}/students/{self.bob['id']}/final-grade").json()
        self.assertAlmostEqual(final["final_grade"], 80.0)

        response = self.client.put(f"{url}/grading-strategy",
                                   json={"teacher_id": self.ana["id"],
                                         "grading_strategy": "unweighted_mean"})
        self.assertEqual(response.status_code, 200)
        final = self.client.get(f"{url}/students/{self.bob['id']}/final-grade").json()
        self.assertAlmostEqual(final["final_grade"], 75.0)

    def test_description_update_notifies(self):
        course = self.create_course(self.ana["id"])
        url = f"/courses/{course['id']}"
        self.client.post(f"{url}/enrollments", json={"student_id": self.bob["id"]})
        response = self.client.put(f"{url}/description",
                                   json={"teacher_id": self.ana["id"], "description": "Matrices"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["description"], "Matrices")
        inbox = self.client.get(f"/students/{self.bob['id']}/notifications").json()
        self.assertEqual(inbox, ["You have been enrolled in course Algebra.",
                                 "Course Algebra has been updated."])

    def test_only_owning_teacher_edits_and_grades(self):
        ivo = self.register("teacher", "ivo")
        course = self.create_course(self.ana["id"])
        url = f"/courses/{course['id']}"
        self.client.post(f"{url}/enrollments", json={"student_id": self.bob["id"]})

        for outsider in (ivo, self.bob):
            with self.subTest(outsider=outsider["username"]):
                response = self.client.put(f"{url}/description", json={
                    "teacher_id": outsider["id"], "description": "Hijacked"
                })
                self.assertEqual(response.status_code, 403)
                response = self.client.post(f"{url}/grades",
                                            json=self.grade_payload(0, teacher=outsider))
                self.assertEqual(response.status_code, 403)
                response = self.client.put(f"{url}/grading-strategy", json={
                    "teacher_id": outsider["id"], "grading_strategy": "weighted_mean"
                })
                self.assertEqual(response.status_code, 403)

        course = self.client.get(url).json()
        self.assertEqual(course["description"], "Linear algebra")
        self.assertEqual(course["grading_strategy"], "unweighted_mean")
        self.assertEqual(self.directory.get_course(course["id"]).grades_for(
            self.directory.get_user(self.bob["id"])), ())

    def test_edit_without_actor_is_rejected(self):
        course = self.create_course(self.ana["id"])
        response = self.client.put(f"/courses/{course['id']}/description",
                                   json={"description": "Anonymous"})
        self.assertEqual(response.status_code, 422)

    def test_teacher_courses_and_roster(self):
        algebra = self.create_course(self.ana["id"], "Algebra")
        self.create_course(self.ana["id"], "Geometry")
        names = [c["name"] for c in self.client.get(f"/teachers/{self.ana['id']}/courses").json()]
        self.assertEqual(names, ["Algebra", "Geometry"])
        self.client.post(f"/courses/{algebra['id']}/enrollments", json={"student_id": self.bob["id"]})
        students = self.client.get(f"/courses/{algebra['id']}/students").json()
        self.assertEqual([s["username"] for s in students], ["bob"])
        self.assertEqual(self.client.get("/courses").json()[0]["name"], "Algebra")

    def test_missing_course(self):
        self.assertEqual(self.client.get("/courses/missing").status_code, 404)

    def test_statistics(self):
        self.create_course(self.ana["id"])
        stats = self.client.get("/statistics").json()["statistics"]
        self.assertEqual(stats["total_users"], 2)
        self.assertEqual(stats["total_courses"], 1)


if __name__ == "__main__":
    unittest.main()
