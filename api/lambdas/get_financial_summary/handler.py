"""
Lambda handler: GET /api/politicians/{id}/financials

Totals plus top contribution/expenditure industries and investment types
for one politician.
"""

import os
import logging
from api.lib import success_response, error_response, get_path_param
from api.lib.resources import get_store
from api.lib.response_models import FinancialSummaryResponse
from ingestion.lib.analysis.industry_aggregation import build_financial_summary

logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))


def handler(event, context):
    try:
        politician_id = get_path_param(event, 'id')
        if not politician_id:
            return error_response("Missing politician ID", 400)

        store = get_store()
        if store.get_politician(politician_id) is None:
            return error_response("Politician not found", 404, details={'id': politician_id})

        summary = build_financial_summary(
            store.list_contributions(politician_id),
            store.list_expenditures(politician_id),
            store.list_investments(politician_id),
        )
        logger.info(
            f"Financial summary for {politician_id}: "
            f"contributions={summary.total_contributions}, expenditures={summary.total_expenditures}"
        )

        return success_response(
            FinancialSummaryResponse(politician_id=politician_id, **summary.model_dump())
        )

    except Exception as e:
        logger.error(f"Error building financial summary: {e}", exc_info=True)
        return error_response("Failed to build financial summary", 500)
