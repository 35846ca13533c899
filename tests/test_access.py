from dataclasses import dataclass

import pytest

from frontdesk.access import (
    Allow,
    RedirectTo,
    RouteKind,
    Section,
    classify_route,
    resolve_root_redirect,
    resolve_section_access,
    sign_in_redirect,
)


@dataclass
class Profile:
    role: str


@pytest.mark.parametrize(
    "path",
    [
        "/",
        "/landing",
        "/visitor",
        "/visitor/check-in",
        "/sign-in/factor-one",
        "/employee/respond",
        "/api/trpc/visitor.create",
        "/api/trpc/employee.respondToVisitor",
    ],
)
def test_public_paths(path):
    assert classify_route(path) == RouteKind.PUBLIC


@pytest.mark.parametrize("path", ["/dashboard", "/dashboard/staff", "/employee/dashboard", "/it", "/it/tickets/4"])
def test_protected_paths(path):
    assert classify_route(path) == RouteKind.PROTECTED


@pytest.mark.parametrize("path", ["/api/trpc/ticket.getAll", "/health", "/landingpage", "/reports"])
def test_other_paths_are_neither(path):
    assert classify_route(path) == RouteKind.NEITHER


def test_respond_page_is_public_despite_employee_prefix():
    assert classify_route("/employee/respond") == RouteKind.PUBLIC
    assert classify_route("/employee/respond/extra") == RouteKind.PROTECTED


def test_wildcard_is_the_only_pattern_syntax():
    # A dot in a procedure name must not match arbitrary characters
    assert classify_route("/api/trpc/visitorXcreate") == RouteKind.NEITHER


def test_sign_in_redirect_encodes_original_url():
    assert sign_in_redirect("http://testserver/dashboard/staff") == (
        "/sign-in?redirect_url=http%3A%2F%2Ftestserver%2Fdashboard%2Fstaff"
    )


@pytest.mark.parametrize(
    "role,section,expected",
    [
        ("Admin", Section.ADMIN, Allow()),
        ("Receptionist", Section.ADMIN, Allow()),
        ("Employee", Section.ADMIN, RedirectTo("/employee/dashboard")),
        ("IT Staff", Section.ADMIN, RedirectTo("/it/dashboard")),
        ("Employee", Section.EMPLOYEE, Allow()),
        ("IT Staff", Section.EMPLOYEE, Allow()),
        ("Admin", Section.EMPLOYEE, Allow()),
        ("Receptionist", Section.EMPLOYEE, RedirectTo("/dashboard")),
        ("IT Staff", Section.IT, Allow()),
        ("Admin", Section.IT, Allow()),
        ("Employee", Section.IT, RedirectTo("/employee/dashboard")),
        ("Receptionist", Section.IT, RedirectTo("/dashboard")),
    ],
)
def test_section_access_by_role(role, section, expected):
    assert resolve_section_access(Profile(role), section) == expected


def test_missing_profile_only_bootstraps_admin_section():
    assert resolve_section_access(None, Section.ADMIN) == Allow()
    assert resolve_section_access(None, Section.EMPLOYEE) == RedirectTo("/dashboard")
    assert resolve_section_access(None, Section.IT) == RedirectTo("/dashboard")


@pytest.mark.parametrize(
    "authenticated,role,expected",
    [
        (False, None, "/landing"),
        (False, "Employee", "/landing"),
        (True, "Employee", "/employee/dashboard"),
        (True, "IT Staff", "/it/dashboard"),
        (True, "Admin", "/dashboard"),
        (True, "Receptionist", "/dashboard"),
        (True, None, "/dashboard"),
    ],
)
def test_root_redirect(authenticated, role, expected):
    assert resolve_root_redirect(authenticated, role) == expected
