"""
Route classification and section access rules.

Everything here is a pure decision over paths and roles; the middleware,
the section pages and the root redirect all go through these functions.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from urllib.parse import quote

from .models import ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_IT_STAFF, ROLE_RECEPTIONIST

SIGN_IN_PATH = "/sign-in"
LANDING_PATH = "/landing"
ADMIN_HOME = "/dashboard"
EMPLOYEE_HOME = "/employee/dashboard"
IT_HOME = "/it/dashboard"

# Patterns use "(.*)" as the only wildcard; everything else matches literally
PUBLIC_ROUTES = [
    "/",
    "/landing",
    "/visitor(.*)",
    "/sign-in(.*)",
    "/sign-up(.*)",
    "/select-organization",
    "/auto-select-org",
    "/no-organization",
    "/onboarding",
    "/employee/respond",
    "/help",
    "/api/trpc/visitor.create",
    "/api/trpc/visitor.search",
    "/api/trpc/visitor.checkoutPublic",
    "/api/trpc/staff.getActiveStaff",
    "/api/trpc/company.getSuggestions",
    "/api/trpc/employee.respondToVisitor",
    "/api/trpc/employee.getProfile",
]

PROTECTED_ROUTES = [
    "/dashboard(.*)",
    "/employee(.*)",
    "/it(.*)",
]


def _compile(pattern: str) -> re.Pattern:
    literal_parts = pattern.split("(.*)")
    return re.compile("^" + "(.*)".join(re.escape(part) for part in literal_parts) + "$")


_PUBLIC_MATCHERS = [_compile(p) for p in PUBLIC_ROUTES]
_PROTECTED_MATCHERS = [_compile(p) for p in PROTECTED_ROUTES]


class RouteKind(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    NEITHER = "neither"


def classify_route(path: str) -> RouteKind:
    """Public wins over protected so /employee/respond stays reachable from email links."""
    if any(m.match(path) for m in _PUBLIC_MATCHERS):
        return RouteKind.PUBLIC
    if any(m.match(path) for m in _PROTECTED_MATCHERS):
        return RouteKind.PROTECTED
    return RouteKind.NEITHER


def sign_in_redirect(original_url: str) -> str:
    return f"{SIGN_IN_PATH}?redirect_url={quote(original_url, safe='')}"


class Section(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"
    IT = "it"


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class RedirectTo:
    path: str


AccessDecision = Union[Allow, RedirectTo]


@dataclass(frozen=True)
class SectionRule:
    allowed_roles: frozenset
    # None lets a caller without a staff profile through (bootstrap)
    no_profile_redirect: Optional[str] = None


SECTION_RULES = {
    Section.ADMIN: SectionRule(frozenset({ROLE_ADMIN, ROLE_RECEPTIONIST})),
    Section.EMPLOYEE: SectionRule(frozenset({ROLE_EMPLOYEE, ROLE_IT_STAFF, ROLE_ADMIN}), no_profile_redirect=ADMIN_HOME),
    Section.IT: SectionRule(frozenset({ROLE_IT_STAFF, ROLE_ADMIN}), no_profile_redirect=ADMIN_HOME),
}

ROLE_HOMES = {
    ROLE_EMPLOYEE: EMPLOYEE_HOME,
    ROLE_IT_STAFF: IT_HOME,
    ROLE_RECEPTIONIST: ADMIN_HOME,
    ROLE_ADMIN: ADMIN_HOME,
}


def home_for_role(role: Optional[str]) -> str:
    return ROLE_HOMES.get(role, ADMIN_HOME)


def resolve_section_access(profile, section: Section) -> AccessDecision:
    """`profile` is a Staff row (anything with `.role`) or None."""
    rule = SECTION_RULES[section]
    if profile is None:
        if rule.no_profile_redirect is None:
            return Allow()
        return RedirectTo(rule.no_profile_redirect)
    if profile.role in rule.allowed_roles:
        return Allow()
    return RedirectTo(home_for_role(profile.role))


def resolve_root_redirect(is_authenticated: bool, role: Optional[str]) -> str:
    if not is_authenticated:
        return LANDING_PATH
    if role == ROLE_EMPLOYEE:
        return EMPLOYEE_HOME
    if role == ROLE_IT_STAFF:
        return IT_HOME
    return ADMIN_HOME
