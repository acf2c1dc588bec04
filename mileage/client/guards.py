from mileage.client.navigation import Router
from mileage.client.session import AuthenticationService


def no_auth_guard(session: AuthenticationService, router: Router) -> bool:
    """Allow anonymous-only pages (login, signup); signed-in users go to the dashboard."""
    if session.is_logged_in():
        router.navigate("/")
        return False
    return True
