"""Site settings, navigation and landing page content."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from flask import current_app, url_for
from flask_login import current_user

GUEST_NAV_LINKS: List[Dict[str, Any]] = [
    {"label": "Home", "endpoint": "public.landing", "anchor": None},
    {"label": "About", "endpoint": "public.landing", "anchor": "about"},
    {"label": "Activities", "endpoint": "public.landing", "anchor": "activities"},
]
MEMBER_NAV_LINKS: List[Dict[str, Any]] = [
    {"label": "Dashboard", "endpoint": "portal.dashboard", "anchor": None},
    {"label": "My Activities", "endpoint": "portal.activities", "anchor": None},
    {"label": "Opportunities", "endpoint": "portal.opportunities", "anchor": None},
]

# Illustrative only; the landing page does not read live activities.
FEATURED_ACTIVITIES: List[Dict[str, Any]] = [
    {
        "title": "Community Health Camp",
        "description": "Provide free medical checkups and health awareness in underserved communities.",
        "location": "Karachi, Pakistan",
        "date": "Feb 15, 2026",
        "volunteers": 25,
        "category": "Healthcare",
        "image": "https://images.unsplash.com/photo-1576091160550-2173dba999ef?auto=format&fit=crop&w=600&q=80",
    },
    {
        "title": "Education Support Program",
        "description": "Help underprivileged children with tutoring and educational resources.",
        "location": "Lahore, Pakistan",
        "date": "Feb 20, 2026",
        "volunteers": 15,
        "category": "Education",
        "image": "https://images.unsplash.com/photo-1503676260728-1c00da094a0b?auto=format&fit=crop&w=600&q=80",
    },
    {
        "title": "Food Distribution Drive",
        "description": "Distribute essential food packages to families affected by economic hardship.",
        "location": "Islamabad, Pakistan",
        "date": "Feb 25, 2026",
        "volunteers": 30,
        "category": "Relief",
        "image": "https://images.unsplash.com/photo-1593113598332-cd59a0c3a9e2?auto=format&fit=crop&w=600&q=80",
    },
]

ABOUT_FEATURES: List[Dict[str, str]] = [
    {
        "title": "Our Mission",
        "text": "To serve humanity through organized volunteer efforts, providing relief and support to those in need.",
    },
    {
        "title": "Community Focus",
        "text": "Building stronger communities by connecting passionate volunteers with meaningful service opportunities.",
    },
    {
        "title": "Compassion First",
        "text": "Every volunteer brings compassion and dedication, making a real difference in people's lives.",
    },
]

VOLUNTEER_BENEFITS: List[str] = [
    "Flexible volunteering schedules",
    "Training and skill development",
    "Recognition and certificates",
    "Network with like-minded people",
    "Make a real community impact",
    "Personal growth opportunities",
]


def _resolve(link: Dict[str, Any]) -> Dict[str, Any]:
    href = url_for(link["endpoint"])
    if link.get("anchor"):
        href = f"{href}#{link['anchor']}"
    return {"label": link["label"], "href": href, "endpoint": link["endpoint"]}


def nav_links(is_member: bool) -> List[Dict[str, Any]]:
    links = MEMBER_NAV_LINKS if is_member else GUEST_NAV_LINKS
    return [_resolve(link) for link in links]


def inject_site_settings() -> Dict[str, Any]:
    is_member = bool(getattr(current_user, "is_authenticated", False))
    return {
        "site_name": current_app.config.get("SITE_NAME", "Al-Khidmat"),
        "site_tagline": current_app.config.get("SITE_TAGLINE", ""),
        "nav_links": nav_links(is_member),
        "current_year": datetime.now(timezone.utc).year,
    }


__all__ = [
    "ABOUT_FEATURES",
    "FEATURED_ACTIVITIES",
    "VOLUNTEER_BENEFITS",
    "inject_site_settings",
    "nav_links",
]
