def register(client, name="Jane Doe", email="jane@example.com", password="pw123456",
             confirmation=None, remote_addr="127.0.0.1"):
    payload = {
        "name": name,
        "email": email,
        "password": password,
        "password_confirmation": password if confirmation is None else confirmation,
    }
    return client.post("/api/register", json=payload, environ_base={"REMOTE_ADDR": remote_addr})


def login(client, email="jane@example.com", password="pw123456", remote_addr="127.0.0.1"):
    return client.post(
        "/api/login",
        json={"email": email, "password": password},
        environ_base={"REMOTE_ADDR": remote_addr},
    )


def bearer(token):
    return {"Authorization": f"Bearer {token}"}
