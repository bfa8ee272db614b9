from docspot.models.user import User

ADMIN_EMAIL = "admin@example.com"
SECOND_ADMIN_EMAIL = "second.admin@example.com"
DEFAULT_PASSWORD = "secret1"


def api(path: str) -> str:
    return f"/api/v1{path}"


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_and_login(client, name: str, email: str, password: str = DEFAULT_PASSWORD):
    """Register a user and return (auth headers, user json)."""
    response = client.post(
        api("/users/register"),
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 200, response.text

    response = client.post(api("/users/login"), json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    data = response.json()
    return auth_headers(data["token"]), data["user"]


def doctor_application(**overrides) -> dict:
    application = {
        "fullname": "Dr. Grace Hopper",
        "phone": "555-0100",
        "email": "grace@example.com",
        "address": "1 Clinic Road",
        "specialization": "Cardiologist",
        "experience": 12,
        "fees": 500,
        "timings": ["Mon 09:00-12:00", "Wed 14:00-17:00"],
    }
    application.update(overrides)
    return application


def get_user_record(session, email: str) -> User:
    session.expire_all()
    return session.query(User).filter(User.email == email).first()


def get_profile(client, headers) -> dict:
    response = client.get(api("/users/profile"), headers=headers)
    assert response.status_code == 200, response.text
    return response.json()
