"""
Controller matchers.

These matchers are designed for controller tests. The web layer under test
captures what an action did into a ``ControllerResponse``; routing and
declaration matchers inspect a router or the controller itself.

Supported matchers:
    - respond_with: response status (code or 'success'/'redirect'/'missing'/'error')
    - redirect_to: redirect location
    - render_template: rendered template
    - render_with_layout: rendered layout
    - set_session: session contents
    - set_the_flash: flash contents
    - route: request routing
    - rescue_from: exception handlers
    - filter_param: parameters filtered from logs

Usage:
    from shouldmatch.controller import ControllerResponse, redirect_to, set_the_flash
    from shouldmatch.matchers import assert_matches

    response = ControllerResponse(
        status=302,
        location="/users/42",
        flash={"success": "User successfully added!"},
    )
    assert_matches(response, redirect_to("/users/42"))
    assert_matches(response, set_the_flash()["success"].to("User successfully added!"))
"""

# Models
from .models import ControllerResponse, Route, Router, RouteTable, split_endpoint

# Response matchers
from .response import (
    RedirectToMatcher,
    RenderTemplateMatcher,
    RenderWithLayoutMatcher,
    RespondWithMatcher,
    redirect_to,
    render_template,
    render_with_layout,
    respond_with,
)

# Session and flash
from .state import SetSessionMatcher, SetTheFlashMatcher, set_session, set_the_flash

# Routing
from .routing import RouteMatcher, route

# Declarations
from .declarations import FilterParamMatcher, RescueFromMatcher, filter_param, rescue_from

__all__ = [
    # Models
    "ControllerResponse",
    "Route",
    "Router",
    "RouteTable",
    "split_endpoint",
    # Response matchers
    "RespondWithMatcher",
    "RedirectToMatcher",
    "RenderTemplateMatcher",
    "RenderWithLayoutMatcher",
    "respond_with",
    "redirect_to",
    "render_template",
    "render_with_layout",
    # Session and flash
    "SetSessionMatcher",
    "SetTheFlashMatcher",
    "set_session",
    "set_the_flash",
    # Routing
    "RouteMatcher",
    "route",
    # Declarations
    "RescueFromMatcher",
    "FilterParamMatcher",
    "rescue_from",
    "filter_param",
]
