"""
Lambda handler: POST /api/reports

Submit an ethics report. New reports start as 'pending'.

Body:
    {"title": "...", "description": "...", "evidence": "...", "politicianId": "..."}
"""

import os
import logging
from pydantic import ValidationError
from api.lib import success_response, error_response, parse_json_body, RequestParseError
from api.lib.resources import get_store
from api.lib.response_models import ReportCreateRequest

logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))


def handler(event, context):
    try:
        try:
            payload = ReportCreateRequest.model_validate(parse_json_body(event))
        except RequestParseError as e:
            return error_response(str(e), 400)
        except ValidationError as e:
            fields = sorted({str(err['loc'][0]) for err in e.errors() if err.get('loc')})
            return error_response("Invalid report", 400, details={'fields': fields})

        store = get_store()
        if payload.politician_id and store.get_politician(payload.politician_id) is None:
            return error_response(
                "Politician not found", 404, details={'id': payload.politician_id}
            )

        report = store.create_report(
            title=payload.title,
            description=payload.description,
            evidence=payload.evidence,
            politician_id=payload.politician_id,
        )
        logger.info(f"Created report {report.id} (politician={report.politician_id})")
        return success_response(report, status_code=201)

    except Exception as e:
        logger.error(f"Error creating report: {e}", exc_info=True)
        return error_response("Failed to create report", 500)
