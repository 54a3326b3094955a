"""
Linguistic DNA Routes

Stateless endpoints wrapping the analyzer, prompt compiler and scorer.
"""

from fastapi import APIRouter

from .models import (
    AnalyzeRequest,
    CompileRequest,
    CompileResponse,
    ScoreRequest,
    ScoreResponse,
)
from ..dna.analyzer import analyze_text
from ..dna.models import LinguisticDNA
from ..dna.prompt import compile_dna_prompt
from ..dna.scorer import score_similarity

router = APIRouter(prefix="/dna", tags=["dna"])


@router.post("/analyze", response_model=LinguisticDNA, summary="Extract Linguistic DNA")
def analyze(req: AnalyzeRequest) -> LinguisticDNA:
    return analyze_text(req.text)


@router.post("/compile", response_model=CompileResponse, summary="Render DNA as style instructions")
def compile_prompt(req: CompileRequest) -> CompileResponse:
    return CompileResponse(prompt=compile_dna_prompt(req.dna, req.intent))


@router.post("/score", response_model=ScoreResponse, summary="Score generated text against DNA")
def score(req: ScoreRequest) -> ScoreResponse:
    """
    Re-analyze `generated_text` and compare it with the reference DNA.
    """
    return ScoreResponse(score=score_similarity(req.reference, req.generated_text))
