from conftest import auth


PATH = "/functions/v1/create-vendor-user"


def payload(**overrides):
    body = {
        "email": "orchard@market.test",
        "password": "orchard-pass",
        "userData": {
            "name": "Sunny Orchard",
            "email": "orchard@market.test",
            "region_id": 7,
            "phone": "+1 555 0199",
            "address": "Row 4, Stall 12",
            "is_active": True,
            "is_management": False,
        },
    }
    body.update(overrides)
    return body


def user_ids_for(backend, email):
    return [user["id"] for user in backend.users.values() if user["email"] == email]


def test_creates_confirmed_account_and_linked_vendor(client, backend):
    resp = client.post(PATH, json=payload(), headers=auth())
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Vendor user created successfully"

    [user_id] = user_ids_for(backend, "orchard@market.test")
    assert backend.users[user_id]["email_confirmed"] is True
    vendor = body["vendor"]
    assert vendor["user_id"] == user_id
    assert vendor["name"] == "Sunny Orchard"
    assert vendor["region_id"] == 7
    assert backend.vendors[str(vendor["id"])]["user_id"] == user_id


def test_vendor_email_defaults_to_account_email(client, backend):
    body = payload()
    del body["userData"]["email"]
    resp = client.post(PATH, json=body, headers=auth())
    assert resp.status_code == 200
    assert resp.json()["vendor"]["email"] == "orchard@market.test"


def test_client_supplied_user_id_is_ignored(client, backend):
    body = payload()
    body["userData"]["user_id"] = "someone-else"
    resp = client.post(PATH, json=body, headers=auth())
    assert resp.status_code == 200
    assert resp.json()["vendor"]["user_id"] != "someone-else"


def test_credential_failure_writes_no_vendor(client, backend):
    backend.fail["create_user"] = "Password should be at least 6 characters"
    before = dict(backend.vendors)
    resp = client.post(PATH, json=payload(), headers=auth())
    assert resp.status_code == 400
    assert resp.json() == {"error": "Failed to create auth user: Password should be at least 6 characters"}
    assert backend.called("insert") == []
    assert backend.vendors == before


def test_duplicate_account_email_is_a_credential_failure(client, backend):
    resp = client.post(PATH, json=payload(email="farm@market.test"), headers=auth())
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Failed to create auth user:")
    assert backend.called("insert") == []


def test_insert_failure_deletes_the_new_account(client, backend):
    backend.fail["insert"] = 'duplicate key value violates unique constraint "vendors_email_key"'
    resp = client.post(PATH, json=payload(), headers=auth())
    assert resp.status_code == 400
    assert resp.json() == {
        "error": 'Failed to create vendor: duplicate key value violates unique constraint "vendors_email_key"'
    }
    # No orphan credential account remains.
    assert user_ids_for(backend, "orchard@market.test") == []
    assert len(backend.called("delete_user")) == 1


def test_failed_cleanup_is_reported_but_insert_error_wins(client, backend):
    backend.fail["insert"] = "insert rejected"
    backend.fail["delete_user"] = "auth service unavailable"
    resp = client.post(PATH, json=payload(), headers=auth())
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Failed to create vendor: insert rejected"
    assert body["cleanup_error"] == "auth service unavailable"
    # The compensating delete is attempted once and not retried.
    assert len(backend.called("delete_user")) == 1
    assert len(user_ids_for(backend, "orchard@market.test")) == 1


def test_missing_credentials_are_rejected_before_any_write(client, backend):
    resp = client.post(PATH, json=payload(password=None), headers=auth())
    assert resp.status_code == 400
    assert resp.json() == {"error": "Email and password are required"}
    assert backend.called("create_user") == []


def test_missing_vendor_data_is_rejected(client, backend):
    body = payload()
    del body["userData"]
    resp = client.post(PATH, json=body, headers=auth())
    assert resp.status_code == 400
    assert backend.called("create_user") == []


def test_vendor_without_name_fails_validation(client, backend):
    body = payload()
    del body["userData"]["name"]
    resp = client.post(PATH, json=body, headers=auth())
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request body"
    assert backend.called("create_user") == []
