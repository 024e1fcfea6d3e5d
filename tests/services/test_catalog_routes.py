"""Catalog Routes — genre and book CRUD with soft delete."""

from uuid import uuid4


# ─── Genres ──────────────────────────────────────────────────────

async def test_genre_lifecycle(client, auth_headers):
    created = await client.post(
        "/genre", json={"name": "  Mystery "}, headers=auth_headers,
    )
    assert created.status_code == 201
    genre_id = created.json()["data"]["id"]
    assert created.json()["data"]["name"] == "Mystery"

    fetched = await client.get(f"/genre/{genre_id}")
    assert fetched.status_code == 200

    renamed = await client.patch(
        f"/genre/{genre_id}", json={"name": "Crime"}, headers=auth_headers,
    )
    assert renamed.json()["data"]["name"] == "Crime"

    removed = await client.delete(f"/genre/{genre_id}", headers=auth_headers)
    assert removed.json()["message"] == "Genre removed successfully"
    assert (await client.get(f"/genre/{genre_id}")).status_code == 404


async def test_genre_duplicate_name_is_409(client, auth_headers, make_genre):
    await make_genre("Poetry")
    res = await client.post("/genre", json={"name": "Poetry"}, headers=auth_headers)
    assert res.status_code == 409


async def test_genre_name_reusable_after_delete(client, auth_headers, make_genre):
    genre = await make_genre("Poetry")
    await client.delete(f"/genre/{genre.id}", headers=auth_headers)
    res = await client.post("/genre", json={"name": "Poetry"}, headers=auth_headers)
    assert res.status_code == 201


async def test_genre_write_requires_token(client):
    res = await client.post("/genre", json={"name": "Anything"})
    assert res.status_code == 401


async def test_genre_blank_name_is_400(client, auth_headers):
    res = await client.post("/genre", json={"name": "   "}, headers=auth_headers)
    assert res.status_code == 400


# ─── Books ───────────────────────────────────────────────────────

def _book_body(genre_id, **overrides):
    body = {
        "title": "The Hobbit",
        "writer": "J. R. R. Tolkien",
        "publisher": "Allen & Unwin",
        "publication_year": 1937,
        "price": "12.99",
        "stock_quantity": 4,
        "genre_id": str(genre_id),
    }
    body.update(overrides)
    return body


async def test_book_create_and_get(client, auth_headers, make_genre):
    genre = await make_genre("Fantasy")
    created = await client.post(
        "/books", json=_book_body(genre.id), headers=auth_headers,
    )
    assert created.status_code == 201
    book_id = created.json()["data"]["id"]

    res = await client.get(f"/books/{book_id}", headers=auth_headers)
    data = res.json()["data"]
    assert data["title"] == "The Hobbit"
    assert data["genre"] == "Fantasy"
    assert data["price"] == 12.99
    assert data["stock_quantity"] == 4


async def test_book_duplicate_title_is_409(client, auth_headers, make_book):
    book = await make_book(title="Dune")
    res = await client.post(
        "/books", json=_book_body(book.genre_id, title="Dune"), headers=auth_headers,
    )
    assert res.status_code == 409


async def test_book_unknown_genre_is_404(client, auth_headers):
    res = await client.post(
        "/books", json=_book_body(uuid4()), headers=auth_headers,
    )
    assert res.status_code == 404


async def test_book_negative_stock_is_400(client, auth_headers, make_genre):
    genre = await make_genre()
    res = await client.post(
        "/books", json=_book_body(genre.id, stock_quantity=-1), headers=auth_headers,
    )
    assert res.status_code == 400


async def test_book_patch_sets_stock_and_price(
    client, auth_headers, make_book, stock_of,
):
    book = await make_book(price="10.00", stock=1)
    res = await client.patch(
        f"/books/{book.id}",
        json={"stock_quantity": 9, "price": "11.50"},
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert await stock_of(book.id) == 9

    detail = await client.get(f"/books/{book.id}", headers=auth_headers)
    assert detail.json()["data"]["price"] == 11.5


async def test_book_delete_hides_book(client, auth_headers, make_book):
    book = await make_book()
    removed = await client.delete(f"/books/{book.id}", headers=auth_headers)
    assert removed.json()["message"] == "Book removed successfully"

    assert (await client.get(f"/books/{book.id}", headers=auth_headers)).status_code == 404
    again = await client.delete(f"/books/{book.id}", headers=auth_headers)
    assert again.status_code == 404
