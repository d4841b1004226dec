from socialgraph.client.contacts import Contact, build_hash_set
from socialgraph.core.config import settings
from socialgraph.core.phone import hash_phone
from socialgraph.services.contact_service import ContactService


def test_lookup_returns_verified_matches_only(db, make_profile):
    alice = make_profile("Alice", phone_hash=hash_phone("5551112222"))
    make_profile("Unverified")

    found = ContactService(db).lookup_by_hashes([hash_phone("5551112222"), hash_phone("5550000000")])

    assert [p.id for p in found] == [alice.id]


def test_lookup_with_nothing_to_match(db, make_profile):
    make_profile("Unverified")
    service = ContactService(db)
    assert service.lookup_by_hashes([]) == []
    assert service.lookup_by_hashes([hash_phone("5551112222")]) == []


def test_lookup_runs_in_batches(db, make_profile):
    numbers = [f"555000000{i}" for i in range(5)]
    profiles = [make_profile(f"User{i}", phone_hash=hash_phone(n)) for i, n in enumerate(numbers)]
    hashes = [hash_phone(n) for n in numbers] + [hash_phone(numbers[0])]

    found = ContactService(db, chunk_size=2).lookup_by_hashes(hashes)

    assert sorted(p.id for p in found) == sorted(p.id for p in profiles)


def test_chunk_size_defaults_to_settings(db):
    assert ContactService(db).chunk_size == settings.LOOKUP_QUERY_CHUNK
    assert ContactService(db, chunk_size=None).chunk_size == settings.LOOKUP_QUERY_CHUNK
    assert ContactService(db, chunk_size=7).chunk_size == 7


# --- API ---

def test_contacts_scenario(client, make_profile, headers_for):
    caller = make_profile("Caller")
    alice = make_profile("Alice", phone_hash=hash_phone("5551112222"))

    hashes = build_hash_set([Contact(name="Alice", raw_phone="555-111-2222")])
    response = client.post("/api/v1/contacts/lookup", json={"hashes": list(hashes)}, headers=headers_for(caller))

    assert response.status_code == 200
    [match] = response.json()
    assert match["id"] == alice.id
    assert match["display_name"] == "Alice"
    assert hashes[match["phone_hash"]] == "Alice"
    assert "email" not in match


def test_lookup_against_empty_database(client, make_profile, headers_for):
    caller = make_profile("Caller")
    hashes = build_hash_set([Contact(name="Alice", raw_phone="555-111-2222")])

    response = client.post("/api/v1/contacts/lookup", json={"hashes": list(hashes)}, headers=headers_for(caller))

    assert response.status_code == 200
    assert response.json() == []


def test_lookup_rejects_malformed_hashes(client, make_profile, headers_for):
    headers = headers_for(make_profile())
    raw = client.post("/api/v1/contacts/lookup", json={"hashes": ["5551112222"]}, headers=headers)
    upper = client.post("/api/v1/contacts/lookup", json={"hashes": [hash_phone("1").upper()]}, headers=headers)
    assert raw.status_code == 422
    assert upper.status_code == 422


def test_lookup_caps_request_size(client, make_profile, headers_for):
    hashes = [f"{i:064x}" for i in range(1001)]
    response = client.post("/api/v1/contacts/lookup", json={"hashes": hashes}, headers=headers_for(make_profile()))
    assert response.status_code == 422


def test_lookup_requires_session(client):
    response = client.post("/api/v1/contacts/lookup", json={"hashes": []})
    assert response.status_code == 401


def test_only_otp_verified_profiles_become_discoverable(client, make_profile, headers_for):
    caller = make_profile("Caller")
    alice = make_profile("Alice")
    hashes = {"hashes": [hash_phone("5551112222")]}

    assert client.post("/api/v1/contacts/lookup", json=hashes, headers=headers_for(caller)).json() == []

    alice_headers = headers_for(alice)
    request_id = client.post(
        "/api/v1/verification/start", json={"phone": "5551112222"}, headers=alice_headers
    ).json()["request_id"]
    client.post(
        "/api/v1/verification/check",
        json={"request_id": request_id, "code": "123456", "phone": "5551112222"},
        headers=alice_headers,
    )

    [match] = client.post("/api/v1/contacts/lookup", json=hashes, headers=headers_for(caller)).json()
    assert match["id"] == alice.id
