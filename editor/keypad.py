# editor/keypad.py

KEYPAD_TABS = {
    "trig": "Trigonometria",
    "ops": "Operações",
    "calc": "Cálculo",
}

MATH_KEYS = {
    "trig": [
        {"label": "sin", "cmd": "\\sin"}, {"label": "cos", "cmd": "\\cos"}, {"label": "tan", "cmd": "\\tan"},
        {"label": "csc", "cmd": "\\csc"}, {"label": "sec", "cmd": "\\sec"}, {"label": "cot", "cmd": "\\cot"},
        {"label": "θ", "cmd": "\\theta"}, {"label": "α", "cmd": "\\alpha"}, {"label": "β", "cmd": "\\beta"},
        {"label": "π", "cmd": "\\pi"}, {"label": "e", "cmd": "e"}, {"label": "ln", "cmd": "\\ln"},
    ],
    "ops": [
        {"label": "frac", "cmd": "\\frac"}, {"label": "(", "cmd": "("}, {"label": ")", "cmd": ")"},
        {"label": "x²", "cmd": "^2"}, {"label": "xⁿ", "cmd": "^"}, {"label": "√", "cmd": "\\sqrt"},
        {"label": "+", "cmd": "+"}, {"label": "-", "cmd": "-"}, {"label": "*", "cmd": "\\cdot"},
        {"label": "log", "cmd": "\\log"}, {"label": "|x|", "cmd": "|#0|"}, {"label": "eˣ", "cmd": "e^"},
    ],
    "calc": [
        {"label": "lim", "cmd": "\\lim_{x \\to \\infty}"}, {"label": "Σ", "cmd": "\\sum"}, {"label": "∞", "cmd": "\\infty"},
        {"label": "∫", "cmd": "\\int"}, {"label": "d/dx", "cmd": "\\frac{d}{dx}"}, {"label": "dx", "cmd": "dx"},
    ],
}

# Commands that insert a template with placeholders instead of the raw command
INSERT_TEMPLATES = {
    "\\frac": "\\frac{#@}{#?}",
}


def insertion_for(cmd: str) -> str:
    """What the math field should insert at the cursor for a key."""
    return INSERT_TEMPLATES.get(cmd, cmd)


def keypad_layout() -> list[dict]:
    return [
        {
            "tab": tab,
            "title": title,
            "keys": [dict(key, insert=insertion_for(key["cmd"])) for key in MATH_KEYS[tab]],
        }
        for tab, title in KEYPAD_TABS.items()
    ]
