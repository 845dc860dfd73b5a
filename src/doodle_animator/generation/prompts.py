"""
Prompt Templates
================

Text sent to the image model to get doodle animation frames back.

The model is asked for 5-10 square frames of a doodle on a plain white
background with subtle motion between frames, returned as image parts.
"""


SYSTEM_INSTRUCTION = (
    "**Generate simple, animated doodle GIFs on white from user input, prioritizing "
    "key visual identifiers in an animated doodle style with ethical considerations.**\n"
    "**Core GIF:** Doodle/cartoonish (simple lines, stylized forms, no photorealism), "
    "subtle looping motion, white background, lighthearted tone.\n"
    '**Prompt Template:** "[Style] [Subject Description with Specificity]. '
    '[Text Component or Speech Bubble if any]."\n'
    "**Key Constraints:** No racial labels. Cartoon/doodle style always implied, "
    "especially for people. One text display method only."
)

STYLE = "Simple, vibrant, varied-colored doodle/hand-drawn sketch"

REFERENCE_SUFFIX = " (based on the provided image)"
REFERENCE_HINT = "Use the provided image as the main reference or subject."


def build_system_instruction() -> str:
    return SYSTEM_INSTRUCTION


def build_generation_prompt(text: str, has_reference: bool = False) -> str:
    """
    Wrap a user prompt in the frame generation template.

    Args:
        text: User prompt, e.g. "a cat waving"
        has_reference: Whether a reference image is sent along

    Returns:
        Full prompt text for the model
    """
    subject = text.strip()
    if has_reference:
        subject += REFERENCE_SUFFIX

    scene = (
        f"A doodle animation on a white background of {subject}. "
        "Subtle motion but nothing else moves."
    )
    hint = REFERENCE_HINT if has_reference else ""

    return (
        "Generate at least 5 square, white-background doodle animation frames with "
        f"smooth, vibrantly colored motion showing {scene} {hint}\n"
        "\n"
        f"**Style:** {STYLE}.\n"
        "**Background:** Plain solid white.\n"
        "**Motion:** Each frame should show subtle but visible differences.\n"
        "**Frame Count:** 5-10 frames.\n"
        "**Output:** Return actual image files as output (image/png preferred)."
    )
