# routing.py
LOGIN = "/login"
DASHBOARD = "/dashboard"
EMPLOYEES = "/employees"
UPLOAD = "/upload"

PROTECTED = (DASHBOARD, EMPLOYEES, UPLOAD)


def resolve_route(path: str, authenticated: bool) -> str:
    """Where a request for ``path`` actually lands given the auth state."""
    if path == LOGIN:
        return DASHBOARD if authenticated else LOGIN
    if path in PROTECTED:
        return path if authenticated else LOGIN
    # "/" and anything unknown
    return DASHBOARD if authenticated else LOGIN


def path_from_param(value) -> str:
    # st.query_params keeps the path without its leading slash: ?page=employees
    if not value:
        return "/"
    return "/" + str(value).strip("/")


def param_from_path(path: str) -> str:
    return path.strip("/")
