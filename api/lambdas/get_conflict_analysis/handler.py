"""
Lambda handler: GET /api/politicians/{id}/conflicts

Cross-reference one politician's money with recent bills and their own
votes. Results are keyword-overlap heuristics, not findings.
"""

import os
import logging
from api.lib import (
    success_response,
    error_response,
    get_path_param,
    parse_pagination_params,
    parse_query_params,
)
from api.lib.resources import get_store
from api.lib.response_models import ConflictReport
from ingestion.lib.analysis.conflict_scoring import (
    analyze_vote_conflicts,
    scan_bills,
    significant_investments,
    vote_correlations,
)

logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))


def handler(event, context):
    """
    GET /api/politicians/{id}/conflicts

    Query parameters:
    - limit: Number of most recent bills to scan (default 50, max 500)
    """
    try:
        politician_id = get_path_param(event, 'id')
        if not politician_id:
            return error_response("Missing politician ID", 400)

        store = get_store()
        if store.get_politician(politician_id) is None:
            return error_response("Politician not found", 404, details={'id': politician_id})

        limit, _ = parse_pagination_params(parse_query_params(event))

        contributions = store.list_contributions(politician_id)
        investments = store.list_investments(politician_id)
        votes = store.list_votes(politician_id)
        bills = store.list_bills(limit=limit)

        report = ConflictReport(
            politician_id=politician_id,
            bills_scanned=len(bills),
            flagged_bills=scan_bills(bills, contributions, investments),
            vote_conflicts=analyze_vote_conflicts(votes, contributions, investments),
            vote_correlations=vote_correlations(votes, contributions),
            significant_investments=significant_investments(investments, votes),
        )
        logger.info(
            f"Conflict analysis for {politician_id}: {len(report.flagged_bills)} flagged bills "
            f"of {len(bills)}, {len(report.vote_conflicts)} vote conflicts"
        )
        return success_response(report)

    except Exception as e:
        logger.error(f"Error analyzing conflicts: {e}", exc_info=True)
        return error_response("Failed to analyze conflicts", 500)
