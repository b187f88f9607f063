from turnover_predictor.session import SessionStore


def test_token_lifecycle():
    state = {}
    session = SessionStore(state)
    assert session.get_token() is None
    assert not session.is_authenticated

    session.set_token("abc")
    assert state == {"token": "abc"}
    assert session.is_authenticated

    session.clear_token()
    assert session.get_token() is None
    assert not session.is_authenticated
    session.clear_token()  # idempotent


def test_empty_token_is_not_authenticated():
    assert not SessionStore({"token": ""}).is_authenticated


def test_reset_client_state_keeps_only_token():
    state = {"token": "abc", "employees": [1, 2], "emp_search": "x"}
    SessionStore(state).reset_client_state()
    assert state == {"token": "abc"}


def test_employee_cache():
    state = {"token": "abc"}
    session = SessionStore(state)
    assert session.cached_employees() is None

    session.cache_employees([])
    assert session.cached_employees() == []

    session.cache_employees([{"_id": "e1"}])
    assert state["employees"] == [{"_id": "e1"}]

    session.clear_employees()
    assert session.cached_employees() is None
    assert state == {"token": "abc"}
    session.clear_employees()  # idempotent
