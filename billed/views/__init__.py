"""
View renderer: a pure function from a view name and props to markup.

    render(ViewName.BILLS, data=[...])
    render(ViewName.BILLS, error="Erreur 404")
"""

from typing import Any, Callable, Dict

from billed.models.enums import ViewName
from billed.views.bills import bills_page
from billed.views.dashboard import dashboard_page
from billed.views.layout import error_page, loading_page, not_found_page
from billed.views.login import login_page
from billed.views.new_bill import new_bill_page

VIEWS: Dict[ViewName, Callable[..., str]] = {
    ViewName.LOGIN: login_page,
    ViewName.BILLS: bills_page,
    ViewName.NEW_BILL: new_bill_page,
    ViewName.DASHBOARD: dashboard_page,
    ViewName.LOADING: loading_page,
    ViewName.ERROR: error_page,
    ViewName.NOT_FOUND: not_found_page,
}


def render(view_name: ViewName, **props: Any) -> str:
    return VIEWS[ViewName(view_name)](**props)


__all__ = ["render", "VIEWS"]
