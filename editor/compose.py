from models.problem import ProblemMode

DEFAULT_LIMIT_TARGET = "0"

PLACEHOLDERS = {
    ProblemMode.LIMITS: "(x² - 1)",
    ProblemMode.DERIVATIVES: "\\frac{d}{dx} (x^2)",
    ProblemMode.INTEGRALS: "\\int x^2 dx",
}


def build_limit_expression(target: str, body: str) -> str:
    return f"\\lim_{{x \\to {target}}} \\left( {body} \\right)"


def compose_problem_text(mode: ProblemMode, expression: str, limit_target=None) -> str:
    """
    Turn the editor fields into the text sent with the problem.

    Limits have a separate target field; an empty target means x -> 0.
    """
    expression = expression or ""
    if mode is ProblemMode.LIMITS:
        target = (limit_target or "").strip() or DEFAULT_LIMIT_TARGET
        return build_limit_expression(target, expression)
    return expression
