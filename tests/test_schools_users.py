"""
Tests for school and user endpoints.
"""
from campusfeed.models import School


class TestSchoolEndpoints:
    """Test school endpoints."""

    def test_create_school(self, client):
        """Test creating a school."""
        response = client.post("/schools", json={"name": "X"})
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "X"
        assert isinstance(data["id"], int)

    def test_create_school_missing_name(self, client):
        """Test a school needs a name."""
        response = client.post("/schools", json={})
        assert response.status_code == 400
        assert response.json() == {"error": {"message": "name is required", "statusCode": 400}}

    def test_create_school_duplicate_name(self, client):
        """Test school names are unique."""
        assert client.post("/schools", json={"name": "Dup"}).status_code == 201

        response = client.post("/schools", json={"name": "Dup"})
        assert response.status_code == 409
        assert response.json()["error"]["statusCode"] == 409


class TestUserEndpoints:
    """Test user endpoints."""

    def test_create_user(self, client, db):
        """Test creating a user in an existing school."""
        school = School(name="Somewhere")
        db.add(school)
        db.commit()

        response = client.post("/users", json={"name": "A", "schoolId": school.id})
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "A"
        assert data["schoolId"] == school.id
        assert isinstance(data["createdAt"], int)

    def test_create_user_missing_fields(self, client):
        """Test name and schoolId are required."""
        response = client.post("/users", json={"schoolId": 1})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "name is required"

        response = client.post("/users", json={"name": "A"})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "schoolId is required"

    def test_create_user_non_numeric_school(self, client):
        """Test schoolId must be a number."""
        response = client.post("/users", json={"name": "A", "schoolId": "abc"})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "schoolId must be a valid number"

    def test_create_user_unknown_school(self, client):
        """Test a schoolId that references nothing is a 400."""
        response = client.post("/users", json={"name": "A", "schoolId": 9999})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid schoolId"

    def test_get_user(self, client, test_user):
        """Test fetching a user by id."""
        response = client.get(f"/users/{test_user.id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Test User"

    def test_get_user_not_found(self, client):
        """Test fetching a missing user."""
        response = client.get("/users/99999")
        assert response.status_code == 404
        assert response.json() == {"error": {"message": "User not found", "statusCode": 404}}

    def test_get_user_invalid_id(self, client):
        """Test a non-numeric id is rejected."""
        response = client.get("/users/abc")
        assert response.status_code == 400

        response = client.get("/users/²")
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid user ID"
