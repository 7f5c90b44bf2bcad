"""Dialogue resolver: flavor text for interaction outcomes.

Templates may contain ``{name}`` (agent first name) and ``{role}`` (role
label) placeholders. Selection is uniform over the context's templates using
the injected RNG, so output is reproducible under a seed.
"""

from __future__ import annotations

import random
from typing import Dict, List

from .schemas import DialogueContext, NPCCharacter

DIALOGUE_TEMPLATES: Dict[DialogueContext, List[str]] = {
    DialogueContext.HELPING: [
        "Sure, I'd be happy to help! What do you need?",
        "Of course! Let me take a look at that.",
        "No problem, I've dealt with this before. Let's figure it out together.",
        "I'm free right now. What's the issue?",
    ],
    DialogueContext.BUSY: [
        "Sorry, I'm swamped right now. Can we talk later?",
        "I'm in the middle of something. Maybe ask someone else?",
        "I'd love to help, but I'm on a tight deadline right now.",
        "Can this wait? I'm really buried in work.",
    ],
    DialogueContext.COLLABORATING: [
        "Let's do this! I think we can make something great together.",
        "I'm excited to work with you on this!",
        "This will be a good learning experience for both of us.",
        "Great idea! When do we start?",
    ],
    DialogueContext.DECLINING: [
        "I appreciate the offer, but I'm focused on other things right now.",
        "Maybe next time? I have too much on my plate.",
        "I don't think a {role} is the best fit for this.",
        "Thanks, but I'll have to pass.",
    ],
    DialogueContext.PRAISED: [
        "Thanks! That means a lot coming from you.",
        "I appreciate that! Just trying to do my best.",
        "Wow, thank you! I worked really hard on that.",
        "That's really nice of you to say!",
    ],
    DialogueContext.CONSTRUCTIVE_CRITICISM: [
        "I appreciate the feedback. I'll work on improving that.",
        "You're right. Let me revisit that approach.",
        "Good point. I hadn't thought of it that way.",
        "Thanks for pointing that out. I'll fix it.",
    ],
    DialogueContext.OFFENDED: [
        "That seems a bit harsh...",
        "I don't think that's fair.",
        "Wow. Okay then.",
        "I was just trying my best...",
    ],
    DialogueContext.CASUAL: [
        "Hey! How's your day going?",
        "{name} here. Did you see the game last night?",
        "What are you working on these days?",
        "Got any fun plans for the weekend?",
    ],
    DialogueContext.ACCEPTING: [
        "I'm in! This sounds interesting.",
        "Count me in. I've been wanting to work on something like this.",
        "Absolutely! Let's make it happen.",
        "I'd love to be part of this project.",
    ],
    DialogueContext.TOO_BUSY: [
        "I'm overloaded right now, sorry.",
        "I wish I could, but I'm maxed out on projects.",
        "My plate is completely full at the moment.",
        "I'd have to decline for now. Too much going on.",
    ],
}


class DialogueResolver:
    """Maps an agent and a dialogue context to a line of flavor text."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng if rng is not None else random.Random()

    def generate_response(self, agent: NPCCharacter, context: DialogueContext) -> str:
        template = self.rng.choice(DIALOGUE_TEMPLATES[context])
        return render_template(template, agent)


def render_template(template: str, agent: NPCCharacter) -> str:
    """Substitute agent placeholders in ``template``."""
    return template.replace("{name}", agent.first_name).replace("{role}", agent.role.value)
