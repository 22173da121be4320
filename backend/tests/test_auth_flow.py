from sqlalchemy import update

from db.users import User


async def _register_and_login(client, email: str, password: str, full_name: str) -> str:
    reg = await client.post(
        "/auth/register",
        json={"email": email, "password": password, "full_name": full_name},
    )
    assert reg.status_code == 201, reg.text
    assert reg.json()["full_name"] == full_name
    assert reg.json()["is_superuser"] is False

    login = await client.post("/auth/jwt/login", data={"username": email, "password": password})
    assert login.status_code == 200, login.text
    return login.json()["access_token"]


async def test_register_login_and_purchase_with_jwt(api_client, sweet):
    async with api_client() as client:
        token = await _register_and_login(client, "shopper@example.com", "s3cret-pass", "Sam Shopper")
        headers = {"Authorization": f"Bearer {token}"}

        me = await client.get("/users/me", headers=headers)
        purchase = await client.post(f"/inventory/sweets/{sweet.id}/purchase", json={"quantity": 2}, headers=headers)

    assert me.status_code == 200
    assert me.json()["email"] == "shopper@example.com"
    assert purchase.status_code == 200
    assert purchase.json()["item"]["quantity"] == 8


async def test_register_requires_full_name(api_client):
    async with api_client() as client:
        resp = await client.post("/auth/register", json={"email": "nameless@example.com", "password": "pw-123456"})

    assert resp.status_code == 400


async def test_wrong_password_is_rejected(api_client):
    async with api_client() as client:
        await _register_and_login(client, "careful@example.com", "right-pass", "Casey")
        resp = await client.post("/auth/jwt/login", data={"username": "careful@example.com", "password": "wrong-pass"})

    assert resp.status_code == 400


async def test_admin_flag_is_read_on_every_request(api_client, session_maker, sweet):
    async with api_client() as client:
        token = await _register_and_login(client, "staff@example.com", "staff-pass", "Stevie Staff")
        headers = {"Authorization": f"Bearer {token}"}

        before = await client.post(f"/inventory/sweets/{sweet.id}/restock", json={"quantity": 5}, headers=headers)

        async with session_maker() as session:
            await session.execute(
                update(User).where(User.email == "staff@example.com").values(is_superuser=True)
            )
            await session.commit()

        after = await client.post(f"/inventory/sweets/{sweet.id}/restock", json={"quantity": 5}, headers=headers)

    assert before.status_code == 403
    assert after.status_code == 200
    assert after.json()["item"]["quantity"] == 15
