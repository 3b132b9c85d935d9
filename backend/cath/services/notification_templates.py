# cath/services/notification_templates.py

"""
GOV.UK Notify template selection and personalisation.
"""
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from cath.core.config import settings
from cath.core.logger import logger
from cath.utils.helpers import format_date


def get_template_id(has_pdf: bool = False, has_summary: bool = False) -> str:
    if has_pdf:
        template_id = settings.template_id_pdf_and_summary
    elif has_summary:
        template_id = settings.template_id_summary_only
    else:
        template_id = settings.GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION

    if not template_id:
        raise ValueError("GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION is not set")
    if template_id == settings.GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION and (has_pdf or has_summary):
        logger.warning("Enhanced subscription template not set, using base template")
    return template_id


def build_user_name(first_name: Optional[str], surname: Optional[str]) -> str:
    name = " ".join(part.strip() for part in (first_name, surname) if part and part.strip())
    return name or "User"


def build_template_parameters(
    hearing_list_name: str,
    publication_date: Union[date, datetime],
    location_name: str,
    case_info: Optional[str] = None,
    has_location_subscription: bool = True,
    case_summary: Optional[str] = None,
    link_to_file: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    service_url = settings.CATH_SERVICE_URL
    params: Dict[str, Any] = {
        "ListType": hearing_list_name,
        "content_date": format_date(publication_date),
        "start_page_link": service_url,
        "subscription_page_link": service_url,
        "locations": location_name if has_location_subscription else "",
        "case": "",
        "display_locations": "yes" if has_location_subscription else "",
        "display_case": "",
        "link_to_file": service_url,
        "display_summary": "",
        "summary_of_cases": "",
    }

    if case_info:
        params["case"] = case_info
        params["display_case"] = "yes"

    if case_summary:
        params["display_summary"] = "yes"
        params["summary_of_cases"] = case_summary

    if link_to_file is not None:
        params["link_to_file"] = link_to_file

    return params
