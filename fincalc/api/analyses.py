"""
Saved analysis API endpoints.

A saved analysis stores calculator inputs with a terminal summary under an
opaque id. Lists come back newest first.
"""

import logging
from fastapi import APIRouter, HTTPException, Depends
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from fincalc.api.calculations import BuydInput, DebtPayoffInput, PropertyInput
from fincalc.config import get_settings
from fincalc.db.database import get_db
from fincalc.db.models import AnalysisKind, SavedAnalysis
from fincalc.services.summaries import summarize_buyd, summarize_debt, summarize_property

logger = logging.getLogger(__name__)

router = APIRouter()


class AnalysisCreate(BaseModel):
    """Schema for saving an analysis."""

    kind: AnalysisKind
    title: str
    description: Optional[str] = None
    inputs: Dict[str, Any] = {}


class AnalysisResponse(BaseModel):
    """Schema for a saved analysis."""

    id: str
    kind: AnalysisKind
    title: str
    description: Optional[str]
    inputs: Dict[str, Any]
    summary: Dict[str, Any]
    created_at: Optional[str] = None


class AnalysisListResponse(BaseModel):
    """Response for listing saved analyses."""

    analyses: List[AnalysisResponse]
    total: int


def analysis_to_response(analysis: SavedAnalysis) -> AnalysisResponse:
    """Convert SavedAnalysis model to response schema."""
    return AnalysisResponse(
        id=analysis.id,
        kind=analysis.kind,
        title=analysis.title,
        description=analysis.description,
        inputs=analysis.inputs or {},
        summary=analysis.summary or {},
        created_at=analysis.created_at.isoformat() if analysis.created_at else None,
    )


def build_summary(kind: AnalysisKind, raw_inputs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate inputs for a calculator and compute their terminal summary.

    Args:
        kind: Calculator the inputs belong to
        raw_inputs: Request body the calculator endpoint would accept

    Returns:
        Dict with the normalized inputs under "inputs" and the
        summary under "summary"

    Raises:
        RequestValidationError: If the inputs do not match the calculator
    """
    try:
        if kind == AnalysisKind.investment_property:
            parsed = PropertyInput.model_validate(raw_inputs)
            summary = summarize_property(parsed.to_assumptions())
        elif kind == AnalysisKind.buyd:
            parsed = BuydInput.model_validate(raw_inputs)
            summary = summarize_buyd(parsed.to_inputs())
        else:
            parsed = DebtPayoffInput.model_validate(raw_inputs)
            summary = summarize_debt(
                debts=parsed.to_debts(),
                extra_payment=parsed.extra_payment,
                strategy=parsed.strategy,
                hybrid_threshold=parsed.hybrid_threshold,
                max_months=parsed.resolved_max_months(),
            )
    except ValidationError as e:
        logger.warning(f"Invalid {kind.value} inputs: {e.error_count()} error(s)")
        raise RequestValidationError(e.errors(include_url=False, include_context=False))

    return {"inputs": parsed.model_dump(mode="json"), "summary": summary}


@router.get("/", response_model=AnalysisListResponse)
async def list_analyses(
    skip: int = 0,
    limit: Optional[int] = None,
    kind: Optional[AnalysisKind] = None,
    db: Session = Depends(get_db),
):
    """List saved analyses, newest first."""
    if limit is None:
        limit = get_settings().analyses_page_size

    query = db.query(SavedAnalysis)

    if kind:
        query = query.filter(SavedAnalysis.kind == kind)

    total = query.count()
    analyses = (
        query.order_by(SavedAnalysis.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

    return AnalysisListResponse(
        analyses=[analysis_to_response(a) for a in analyses],
        total=total,
    )


@router.post("/", response_model=AnalysisResponse, status_code=201)
async def create_analysis(
    analysis_data: AnalysisCreate,
    db: Session = Depends(get_db),
):
    """Save an analysis with its computed summary."""
    computed = build_summary(analysis_data.kind, analysis_data.inputs)

    db_analysis = SavedAnalysis(
        kind=analysis_data.kind,
        title=analysis_data.title,
        description=analysis_data.description,
        inputs=computed["inputs"],
        summary=computed["summary"],
    )

    db.add(db_analysis)
    db.commit()
    db.refresh(db_analysis)

    logger.info(f"Saved {analysis_data.kind.value} analysis {db_analysis.id}")

    return analysis_to_response(db_analysis)


@router.get("/{analysis_id}", response_model=AnalysisResponse)
async def get_analysis(
    analysis_id: str,
    db: Session = Depends(get_db),
):
    """Get a saved analysis by ID."""
    db_analysis = db.query(SavedAnalysis).filter(SavedAnalysis.id == analysis_id).first()

    if not db_analysis:
        logger.warning(f"Analysis {analysis_id} not found")
        raise HTTPException(status_code=404, detail="Analysis not found")

    return analysis_to_response(db_analysis)


@router.delete("/{analysis_id}")
async def delete_analysis(
    analysis_id: str,
    db: Session = Depends(get_db),
):
    """Delete a saved analysis."""
    db_analysis = db.query(SavedAnalysis).filter(SavedAnalysis.id == analysis_id).first()

    if not db_analysis:
        logger.warning(f"Analysis {analysis_id} not found")
        raise HTTPException(status_code=404, detail="Analysis not found")

    db.delete(db_analysis)
    db.commit()

    logger.info(f"Deleted analysis {analysis_id}")

    return {"deleted": True, "id": analysis_id}
