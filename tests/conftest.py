import json

import httpx
import pytest

from turnover_predictor.api import ApiClient
from turnover_predictor.session import SessionStore

# every label variant the backend is known to send, and where it must land
RISK_VARIANTS = [
    ("High Risk", "High"),
    ("Medium Risk", "Medium"),
    ("Low Risk", "Low"),
    ("high", "High"),
    ("medium", "Medium"),
    ("low", "Low"),
    ("High", "High"),
    ("Medium", "Medium"),
    ("Low", "Low"),
    ("high risk", "High"),
    ("medium risk", "Medium"),
    ("low risk", "Low"),
    ("  High Risk  ", "High"),
]


@pytest.fixture(params=RISK_VARIANTS, ids=[repr(raw) for raw, _ in RISK_VARIANTS])
def risk_variant(request):
    return request.param


def make_employee(_id, name, department, position="Engineer", risk_level="Low Risk", salary=50000, **extra):
    first, _, last = name.partition(" ")
    emp = {
        "_id": _id,
        "name": name,
        "first_name": first,
        "last_name": last,
        "department": department,
        "position": position,
        "risk_level": risk_level,
        "turnover_probability": 0.2,
        "email": f"{first.lower()}@example.com",
        "hire_date": "2020-01-15",
        "salary": salary,
        "performance_score": 3.5,
        "last_evaluation_date": "2024-06-30",
        "projects": ["Apollo"],
        "skills": ["python"],
    }
    emp.update(extra)
    return emp


@pytest.fixture
def employees():
    return [
        make_employee("e1", "Alice Smith", "Engineering", "Developer", "High Risk", 95000),
        make_employee("e2", "Bob Jones", "Sales", "Account Executive", "Low Risk", 60000),
        make_employee("e3", "Carol White", "Engineering", "QA Analyst", "Medium Risk", 70000),
        make_employee("e4", "Dan Brown", "Finance", "Controller", "mystery", 82000),
        make_employee("e5", "Eve Black", "Sales", "Sales Manager", "high", 88000),
    ]


class Recorder:
    """Fake backend: routes "METHOD /path" to canned responses and records calls."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(f"{request.method} {request.url.path}")
        if route is None:
            return httpx.Response(404, json={"detail": "not found"})
        if callable(route):
            return route(request)
        status, body = route
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body) if body is not None else httpx.Response(status)

    def calls(self):
        return [(r.method, r.url.path) for r in self.requests]

    def body(self, index):
        return json.loads(self.requests[index].content)


@pytest.fixture
def backend():
    return Recorder()


@pytest.fixture
def session():
    return SessionStore({})


@pytest.fixture
def client(session, backend):
    session.set_token("tok-123")
    return ApiClient(session, base_url="http://backend.test", transport=httpx.MockTransport(backend))
