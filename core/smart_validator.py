"""
SMART goal scoring engine.

Rule-based, deterministic evaluation of a goal against the SMART rubric
(Specific, Measurable, Achievable, Relevant, Time-bound) plus an alignment
score against the parent goal it declares to support.

Every evaluator is a pure function: no I/O, no shared state, and no
exceptions for Goal-shaped input. Missing metrics, bad dates or a missing
parent lower the score instead of raising.

Usage:
    from core.smart_validator import evaluate_smart_goal
    feedback = evaluate_smart_goal(goal, parent_goal)
    feedback.smart_score, feedback.overall_grade
"""
import asyncio
import math
import random
from datetime import date, datetime, timezone
from typing import Any, List, Optional, Tuple

from core.logger import get_logger
from core.models import (
    CriterionResult,
    Goal,
    GoalPeriod,
    Numeric,
    SmartFeedback,
    Text,
)
from core.text_normalizer import common_words, count_words, normalize

logger = get_logger("smart_validator")

# Stored already normalised (no accents) so "diseñar" in a title matches.
ACTION_VERBS = (
    "incrementar", "aumentar", "mejorar", "reducir", "implementar", "desarrollar",
    "lanzar", "crear", "establecer", "optimizar", "acelerar", "expandir",
    "consolidar", "fortalecer", "construir", "disenar", "ejecutar", "alcanzar",
    "generar", "producir", "entregar", "completar", "finalizar",
)

CONTRIBUTION_KEYWORDS = (
    "region", "area", "zona", "segmento", "parte", "contribuir",
    "aportar", "sumar", "incrementar", "mejorar",
)

PERIOD_MONTHS = {
    GoalPeriod.ANUAL: 12,
    GoalPeriod.TRIMESTRAL: 3,
    GoalPeriod.MENSUAL: 1,
}

# Acceptable goal duration in months for each period, inclusive
PERIOD_MONTH_RANGE = {
    GoalPeriod.ANUAL: (10, 14),
    GoalPeriod.TRIMESTRAL: (2, 4),
    GoalPeriod.MENSUAL: (0.7, 1.5),
}

MAX_SPECIFIC = 20
MAX_MEASURABLE = 25
MAX_ACHIEVABLE = 20
MAX_RELEVANT = 20
MAX_TIME_BOUND = 20

TOP_LEVEL_RELEVANT_SCORE = 15
ACHIEVABLE_BASE_SCORE = 15

GRADE_THRESHOLDS = (
    (85, "excellent"),
    (70, "good"),
    (50, "needs-work"),
)
LOWEST_GRADE = "poor"

SECONDS_PER_DAY = 24 * 60 * 60
DAYS_PER_MONTH = 30


# --- helpers ---------------------------------------------------------------

def round_half_up(value: float) -> int:
    if not math.isfinite(value):
        # inf and nan pass through, as Math.round does
        return value
    return int(math.floor(value + 0.5))


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a goal date into an aware UTC datetime.

    Accepts ISO-8601 strings (date only, or with time and optional offset or
    "Z"), date and datetime objects. Naive values are taken as UTC.
    Returns None when the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw[-1] in "Zz":
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, Text):
        return value.value != ""
    return True


def _period_label(period: Any) -> str:
    return getattr(period, "value", str(period))


def _shared_tags(goal: Goal, parent: Goal) -> List[str]:
    parent_tags = parent.tags or []
    return [tag for tag in (goal.tags or []) if tag in parent_tags]


def _goal_text(goal: Goal) -> str:
    return f"{goal.title or ''} {goal.description or ''}"


def _metrics_overlap(goal: Goal, parent: Goal) -> bool:
    goal_names = [normalize(m.name) for m in goal.metrics]
    parent_names = [normalize(m.name) for m in parent.metrics]
    return any(
        common_words(goal_name, parent_name)
        for goal_name in goal_names
        for parent_name in parent_names
    )


# --- criteria --------------------------------------------------------------

def evaluate_specific(goal: Goal) -> CriterionResult:
    """S: action verb in the title, a descriptive title and a detailed description."""
    normalized_title = normalize(goal.title)
    has_action_verb = any(verb in normalized_title for verb in ACTION_VERBS)

    score = 0
    if has_action_verb:
        score += 8
    if count_words(goal.title) >= 5:
        score += 6
    if count_words(goal.description) >= 10:
        score += 6

    if score >= 18:
        message = "✓ Específico: Incluye verbo de acción, objeto claro y contexto detallado"
    elif score >= 12:
        message = "⚠ Mejorar especificidad: Agrega más contexto y detalle en la descripción"
    else:
        message = "✗ Poco específico: Incluye verbo de acción claro, objeto específico y contexto detallado"

    return CriterionResult(ok=score >= 15, message=message, score=min(score, MAX_SPECIFIC))


def evaluate_measurable(goal: Goal) -> CriterionResult:
    """M: every metric earns credit for a target, a unit and a baseline."""
    if not goal.metrics:
        return CriterionResult(
            ok=False,
            message="✗ Sin métricas: Define al menos una métrica cuantificable",
            score=0,
        )

    score = 0
    valid_metrics = 0
    for metric in goal.metrics:
        if _is_present(metric.target):
            valid_metrics += 1
            score += 8
        if metric.unit and metric.unit.strip():
            score += 4
        if _is_present(metric.baseline):
            score += 3

    if score >= 20:
        message = f"✓ Medible: {valid_metrics} métrica(s) con objetivos y unidades claras"
    elif score >= 12:
        message = "⚠ Parcialmente medible: Mejorar definición de métricas y unidades"
    else:
        message = "✗ No medible: Define métricas con objetivos numéricos y unidades claras"

    return CriterionResult(ok=score >= 15, message=message, score=min(score, MAX_MEASURABLE))


def evaluate_achievable(goal: Goal) -> CriterionResult:
    """
    A: start optimistic and penalise growth rates that are unrealistic for
    the goal's period. Only numeric baseline/target pairs with a positive
    baseline take part.
    """
    score = ACHIEVABLE_BASE_SCORE
    warnings: List[str] = []
    period_months = PERIOD_MONTHS.get(goal.period, 1)

    for metric in goal.metrics:
        if not (isinstance(metric.baseline, Numeric) and isinstance(metric.target, Numeric)):
            continue
        baseline = metric.baseline.value
        if baseline <= 0:
            continue

        growth_rate = (metric.target.value - baseline) / baseline
        if growth_rate > 2 and period_months <= 3:
            score -= 5
            warnings.append(
                f"Crecimiento de {round_half_up(growth_rate * 100)}% en período corto "
                "podría ser poco realista"
            )
        elif growth_rate > 1 and period_months <= 1:
            score -= 8
            warnings.append("Duplicar métricas en un mes es muy ambicioso")

    score = max(0, min(score, MAX_ACHIEVABLE))
    if score >= 12:
        if warnings:
            message = f"⚠ Moderadamente alcanzable: {warnings[0]}"
        else:
            message = "✓ Alcanzable: Los objetivos parecen realistas para el período definido"
    else:
        reason = warnings[0] if warnings else "Revisa si los objetivos son realistas"
        message = f"✗ Poco alcanzable: {reason}"

    return CriterionResult(ok=score >= 12, message=message, score=score)


def evaluate_relevant(goal: Goal, parent_goal: Optional[Goal] = None) -> CriterionResult:
    """R: overlap of tags, keywords and metric names with the parent goal."""
    if parent_goal is None:
        return CriterionResult(
            ok=True,
            message="✓ Relevante: Objetivo estratégico de alto nivel",
            score=TOP_LEVEL_RELEVANT_SCORE,
        )

    score = 0
    shared_tags = _shared_tags(goal, parent_goal)
    if shared_tags:
        score += 8

    keywords = common_words(_goal_text(goal), _goal_text(parent_goal))
    if len(keywords) >= 2:
        score += 6
    elif len(keywords) >= 1:
        score += 3

    if _metrics_overlap(goal, parent_goal):
        score += 3

    score = min(score, MAX_RELEVANT)
    if score >= 15:
        message = (
            f"✓ Relevante: Alineado con objetivo padre "
            f"({len(shared_tags)} tags, {len(keywords)} palabras clave)"
        )
    elif score >= 10:
        message = "⚠ Parcialmente relevante: Mejorar alineación con objetivo padre"
    else:
        message = "✗ Poca relevancia: Agrega tags o ajusta enfoque para alinear con objetivo padre"

    return CriterionResult(ok=score >= 12, message=message, score=score)


def evaluate_time_bound(goal: Goal) -> CriterionResult:
    """T: a valid date range whose length fits the declared period."""
    start = parse_timestamp(goal.start_date)
    end = parse_timestamp(goal.end_date)

    if start is None or end is None:
        return CriterionResult(
            ok=False,
            message="✗ Fechas inválidas: Define fechas de inicio y fin válidas",
            score=0,
        )
    if end <= start:
        return CriterionResult(
            ok=False,
            message="✗ Fechas inconsistentes: La fecha de fin debe ser posterior al inicio",
            score=0,
        )

    score = 8
    duration_days = math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)
    duration_months = duration_days / DAYS_PER_MONTH
    min_months, max_months = PERIOD_MONTH_RANGE.get(goal.period, (0, 0))
    period = _period_label(goal.period)

    if min_months <= duration_months <= max_months:
        score += 12
        message = (
            f"✓ Tiempo definido: Período de {round_half_up(duration_months)} meses "
            f"coherente con objetivo {period}"
        )
    else:
        score += 5
        message = (
            f"⚠ Duración inconsistente: {round_half_up(duration_months)} meses "
            f"para período {period}"
        )

    return CriterionResult(ok=score >= 15, message=message, score=min(score, MAX_TIME_BOUND))


# --- alignment -------------------------------------------------------------

def calculate_alignment(goal: Goal, parent_goal: Optional[Goal] = None) -> Tuple[int, List[str]]:
    """
    Score how well ``goal`` supports ``parent_goal``.

    Four components (tags 0-40, period containment 10-20, metric names 0-20,
    contribution wording 10-20), one note each, in that order. A goal with
    no parent is fully aligned by definition.
    """
    if parent_goal is None:
        return 100, ["Objetivo estratégico de nivel superior"]

    notes: List[str] = []
    parent_tags = parent_goal.tags or []

    shared_tags = _shared_tags(goal, parent_goal)
    tag_score = min(40, len(shared_tags) * 20)
    if tag_score >= 20:
        notes.append(f"✓ Excelente alineación de tags: {', '.join(shared_tags)}")
    elif tag_score > 0:
        notes.append(f"⚠ Alineación parcial de tags. Considera agregar: {', '.join(parent_tags[:2])}")
    else:
        notes.append(f"✗ Sin tags compartidos. Agrega tags del objetivo padre: {', '.join(parent_tags[:3])}")

    goal_start = parse_timestamp(goal.start_date)
    goal_end = parse_timestamp(goal.end_date)
    parent_start = parse_timestamp(parent_goal.start_date)
    parent_end = parse_timestamp(parent_goal.end_date)
    contained = (
        None not in (goal_start, goal_end, parent_start, parent_end)
        and goal_start >= parent_start
        and goal_end <= parent_end
    )
    temporal_score = 20 if contained else 10
    if contained:
        notes.append("✓ Período alineado con objetivo padre")
    else:
        notes.append("⚠ Período no alineado completamente con objetivo padre")

    metric_alignment = _metrics_overlap(goal, parent_goal)
    metric_score = 20 if metric_alignment else 0
    if metric_alignment:
        notes.append("✓ Métricas complementarias al objetivo padre")
    else:
        notes.append("⚠ Las métricas podrían relacionarse mejor con el objetivo padre")

    goal_text = normalize(_goal_text(goal))
    has_contribution = any(keyword in goal_text for keyword in CONTRIBUTION_KEYWORDS)
    contribution_score = 20 if has_contribution else 10
    if has_contribution:
        notes.append("✓ Clara contribución al objetivo macro")
    else:
        notes.append("⚠ Especifica mejor cómo contribuye al objetivo padre")

    total = tag_score + temporal_score + metric_score + contribution_score
    return max(0, min(100, total)), notes


# --- aggregate -------------------------------------------------------------

def grade_for(smart_score: int) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if smart_score >= threshold:
            return grade
    return LOWEST_GRADE


def evaluate_smart_goal(goal: Goal, parent_goal: Optional[Goal] = None) -> SmartFeedback:
    """
    Run the five SMART criteria and the alignment scorer on ``goal``.

    ``smart_score`` is the plain sum of the criterion scores. Measurable is
    capped at 25 and the others at 20, so a goal can reach 105.
    """
    breakdown = {
        "S": evaluate_specific(goal),
        "M": evaluate_measurable(goal),
        "A": evaluate_achievable(goal),
        "R": evaluate_relevant(goal, parent_goal),
        "T": evaluate_time_bound(goal),
    }
    smart_score = sum(result.score for result in breakdown.values())
    alignment_score, alignment_notes = calculate_alignment(goal, parent_goal)

    feedback = SmartFeedback(
        smart_score=smart_score,
        breakdown=breakdown,
        alignment_score=alignment_score,
        alignment_notes=tuple(alignment_notes),
        overall_grade=grade_for(smart_score),
    )
    logger.debug(
        f"Evaluated goal {goal.id or '<draft>'}: smart={smart_score} "
        f"alignment={alignment_score} grade={feedback.overall_grade}"
    )
    return feedback


async def simulate_ai_validation(
    goal: Goal,
    parent_goal: Optional[Goal] = None,
    *,
    min_delay_ms: int = 1000,
    max_delay_ms: int = 3000,
    rng: Optional[random.Random] = None,
) -> SmartFeedback:
    """
    Score ``goal`` after an artificial "AI thinking" delay.

    The delay is uniform in [min_delay_ms, max_delay_ms). There is no
    cancellation hook: wrap the call in asyncio.wait_for to bound it.
    """
    source = rng or random
    delay_ms = min_delay_ms + source.random() * (max_delay_ms - min_delay_ms)
    await asyncio.sleep(delay_ms / 1000)
    return evaluate_smart_goal(goal, parent_goal)
