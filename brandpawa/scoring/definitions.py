# brandpawa/scoring/definitions.py
# Static definitions for the built-in diagnostics and the stage bands.

from .models import StageThreshold

# --- Stage bands (evaluated highest threshold first, lower bound inclusive) ---
STAGE_THRESHOLDS = [
    StageThreshold(
        min_score=81,
        name="Dominant",
        display_name="Dominant Pawa",
        tagline="Your brand commands attention. Now scale it to command markets.",
        diagnosis="Your brand is clear, trusted, and already producing results. The challenge now is expansion and authority at scale.",
        next_step="Focus on: Thought leadership, Partnerships, Market expansion, Global positioning",
    ),
    StageThreshold(
        min_score=61,
        name="Active",
        display_name="Active Pawa",
        tagline="You're not just seen, you're starting to be felt.",
        diagnosis="You have recognition, presence, and some conversion. The missing piece is alignment and systems.",
        next_step="Refine: Content strategy, Authority positioning, Conversion systems",
    ),
    StageThreshold(
        min_score=31,
        name="Emerging",
        display_name="Emerging Pawa",
        tagline="You have sparks of power, but they're scattered. It's time to channel them.",
        diagnosis="You're visible, but inconsistent. Your audience can't yet trust or recognize your brand at scale.",
        next_step="Strengthen: Brand message, Consistency across platforms, Clear value articulation",
    ),
    StageThreshold(
        min_score=0,
        name="Weak",
        display_name="Weak Pawa",
        tagline="Invisible doesn't mean powerless, but right now nobody can feel your brand.",
        diagnosis="Your brand lacks foundational clarity. Messaging, identity, or visibility is either missing or unclear.",
        next_step="Start with clarity: Who are you? What do you do? Who exactly do you serve?",
    ),
]


def _yes_somewhat_no(qid, text, somewhat_label):
    return {
        "id": qid,
        "text": text,
        "options": [
            {"label": "Yes", "value": "yes", "points": 10},
            {"label": somewhat_label, "value": "somewhat", "points": 5},
            {"label": "No", "value": "no", "points": 0},
        ],
    }


# --- Diagnostic 1: BrandPawa Score ---
BRANDPAWA_SCORE = {
    "id": "brandpawa-score",
    "name": "BrandPawa Score",
    "description": "Measures your brand's foundational strength across 10 critical areas. Each question is worth 10 points.",
    "questions": [
        _yes_somewhat_no("q1", "When people hear your brand name, do they instantly connect it with a specific solution, feeling, or category?", "Somewhat"),
        _yes_somewhat_no("q2", "Does your brand have a clear promise or transformation that sets you apart from competitors?", "It needs work"),
        _yes_somewhat_no("q3", "Is your visual identity (logo, colors, design style) consistent across all platforms?", "Inconsistently"),
        _yes_somewhat_no("q4", "Do people discover and reach out to you because of your online presence?", "Occasionally"),
        _yes_somewhat_no("q5", "Does your website or landing page instantly communicate what you do, who it's for, and why it matters?", "Needs clarity"),
        _yes_somewhat_no("q6", "Is your social media strategically aligned to attract the audience you want, not just active?", "Somewhat"),
        _yes_somewhat_no("q7", "Do people recommend you because they clearly understand and trust your value?", "Rarely"),
        _yes_somewhat_no("q8", "Can your audience describe your brand in one clear sentence without confusion?", "Not always"),
        _yes_somewhat_no("q9", "Do you have a structured system for creating and distributing content that nurtures leads into clients?", "Partially"),
        _yes_somewhat_no("q10", "Is your brand currently generating paying clients, partnerships, or speaking opportunities?", "Not enough"),
    ],
    "pillars": [
        {
            "name": "Positioning & Recognition",
            "question_ids": ["q1", "q8"],
            "max_score": 20,
            "description": "How clearly your brand is positioned and recognized in the market",
            "action_steps": [
                "Define a clear positioning statement",
                "Create consistent brand messaging",
                "Audit how competitors position themselves",
            ],
        },
        {
            "name": "Messaging & Promise",
            "question_ids": ["q2", "q6"],
            "max_score": 20,
            "description": "Clarity and distinctiveness of your brand promise and messaging",
            "action_steps": [
                "Refine your unique value proposition",
                "Develop a messaging framework",
                "Test messaging with your target audience",
            ],
        },
        {
            "name": "Identity & Presence",
            "question_ids": ["q3", "q5"],
            "max_score": 20,
            "description": "Visual consistency and online presence effectiveness",
            "action_steps": [
                "Audit all visual assets for consistency",
                "Optimize website for instant clarity",
                "Create brand guidelines document",
            ],
        },
        {
            "name": "Influence & Perception",
            "question_ids": ["q4", "q7"],
            "max_score": 20,
            "description": "Brand influence, trust, and recommendation factor",
            "action_steps": [
                "Build thought leadership content",
                "Implement a referral program",
                "Collect and showcase testimonials",
            ],
        },
        {
            "name": "Growth & Conversion",
            "question_ids": ["q9", "q10"],
            "max_score": 20,
            "description": "Systems for lead nurturing and revenue generation",
            "action_steps": [
                "Create a content distribution system",
                "Develop conversion optimization strategy",
                "Set up CRM and lead scoring",
            ],
        },
    ],
}


# --- Diagnostic 2: Color Power Matrix ---
# Declaration order doubles as the tie-break order for primary/secondary colour.
COLOR_CATEGORIES = [
    {
        "id": "blue", "name": "Blue", "full_name": "Trust & Strategy", "hex": "#0A2540",
        "description": "Signals authority, trust, intelligence, and long-term stability.",
        "action_steps": [
            "Establish thought leadership through whitepapers",
            "Develop case studies showcasing strategic wins",
            "Create educational content series",
            "Build authority through speaking engagements",
        ],
    },
    {
        "id": "black", "name": "Black", "full_name": "Power & Premium", "hex": "#000000",
        "description": "Represents power, sophistication, and exclusivity.",
        "action_steps": [
            "Refine packaging and unboxing experience",
            "Develop premium pricing strategy",
            "Create exclusive content for high-value clients",
            "Build referral-only programs",
        ],
    },
    {
        "id": "red", "name": "Red", "full_name": "Performance & Action", "hex": "#DC2626",
        "description": "Communicates energy, action, and results.",
        "action_steps": [
            "Showcase results through data dashboards",
            "Implement fast response customer service",
            "Create time-limited offers",
            "Highlight speed and efficiency in marketing",
        ],
    },
    {
        "id": "green", "name": "Green", "full_name": "Stability & Growth", "hex": "#059669",
        "description": "Represents stability, growth, and trustworthiness.",
        "action_steps": [
            "Develop long-term partnership programs",
            "Create evergreen educational content",
            "Build community around shared values",
            "Implement loyalty programs",
        ],
    },
    {
        "id": "purple", "name": "Purple", "full_name": "Vision & Innovation", "hex": "#7C3AED",
        "description": "Signals creativity, vision, and innovation.",
        "action_steps": [
            "Publish future-focused trend reports",
            "Host innovation workshops",
            "Create visionary content series",
            "Build partnerships with innovative companies",
        ],
    },
    {
        "id": "orange", "name": "Orange", "full_name": "Momentum & Creativity", "hex": "#EA580C",
        "description": "Communicates energy, creativity, and momentum.",
        "action_steps": [
            "Launch rapid prototyping projects",
            "Create interactive content experiences",
            "Build community challenges and contests",
            "Develop co-creation programs with customers",
        ],
    },
]

_COLOR_ORDER = [("A", "blue"), ("B", "black"), ("C", "red"), ("D", "green"), ("E", "purple"), ("F", "orange")]


def _color_question(qid, text, labels):
    return {
        "id": qid,
        "text": text,
        "options": [
            {"label": label, "value": value, "points": 10, "category": color}
            for (value, color), label in zip(_COLOR_ORDER, labels)
        ],
    }


COLOR_POWER_MATRIX = {
    "id": "color-power-matrix",
    "name": "Color Power Matrix",
    "description": "Maps your brand to its primary and secondary power colours. Each answer assigns +10 points to one colour.",
    "questions": [
        _color_question("c1", "How should people feel immediately after encountering your brand?", [
            "Informed and confident in their decision", "Impressed and elevated",
            "Energized and ready to take action", "Safe, supported, and reassured",
            "Inspired by what's possible", "Excited to build, try, or experiment"]),
        _color_question("c2", "What best describes how your brand creates value?", [
            "Clear thinking, insight, and structured guidance", "Superior quality, taste, or prestige",
            "Speed, execution, and results", "Stability, consistency, and long-term benefit",
            "Vision, originality, and future-focused ideas", "Creativity, momentum, and experimentation"]),
        _color_question("c3", "Which statement best reflects your ideal market position?", [
            "We help people make smart, informed decisions", "We are premium, selective, and not for everyone",
            "We help people move fast and win", "We are reliable partners for sustainable growth",
            "We see the future before others do", "We build, test, and adapt faster than most"]),
        _color_question("c4", "How do you prefer your brand to be trusted?", [
            "Through logic, clarity, and expertise", "Through perception, polish, and status",
            "Through proof, results, and performance", "Through dependability and consistency",
            "Through ideas, vision, and thought leadership", "Through action, presence, and visibility"]),
        _color_question("c5", "Which pricing mindset fits your brand best?", [
            "You're paying for insight and strategic clarity", "This is premium and priced that way",
            "We justify price through speed and outcomes", "We grow value over time",
            "You're investing in what's next", "We start lean and scale fast"]),
        _color_question("c6", "What frustrates you most about competitors in your space?", [
            "They lack depth or clear thinking", "They look cheap or undifferentiated",
            "They move too slowly", "They chase trends without stability",
            "They think too small or play safe", "They overthink instead of building"]),
        _color_question("c7", "How would you describe your content style?", [
            "Educational and insight-driven", "Curated, polished, and premium",
            "Direct, bold, and results-focused", "Calm, supportive, and growth-oriented",
            "Visionary, philosophical, and future-focused", "Energetic, experimental, and fast-moving"]),
        _color_question("c8", "Who is your brand primarily built for?", [
            "Decision-makers who value clarity", "High-value clients who value status and quality",
            "Achievers who want fast results", "Builders who value stability and longevity",
            "Visionaries and forward-thinkers", "Creators, founders, and doers"]),
        _color_question("c9", "What best describes your growth ambition?", [
            "Become a trusted authority in my field", "Become a premium leader in my category",
            "Scale fast and dominate performance metrics", "Build a brand that lasts decades",
            "Shape culture and future conversations", "Build momentum and expand quickly"]),
        _color_question("c10", "If your brand were remembered for ONE thing, what should it be?", [
            "Clear thinking and strategic insight", "Power, prestige, and presence",
            "Action, results, and wins", "Trust, consistency, and growth",
            "Vision, originality, and innovation", "Energy, creativity, and movement"]),
    ],
    # Every completed matrix maps to a colour pair, so a single band applies
    "stages": [
        {
            "min_score": 0,
            "name": "Mapped",
            "display_name": "Color Power Mapped",
            "tagline": "Your brand's power colours are defined.",
            "next_step": "Apply your primary colour to your visual identity and messaging.",
        },
    ],
    "categories": COLOR_CATEGORIES,
    "positioning": {
        "blue_purple": "Visionary Authority",
        "blue_black": "Strategic Premium",
        "blue_red": "Strategic Performance",
        "blue_green": "Strategic Growth",
        "blue_orange": "Strategic Innovation",
        "black_blue": "Premium Authority",
        "black_red": "Premium Performance",
        "black_green": "Premium Legacy",
        "black_purple": "Luxury Innovation",
        "black_orange": "Premium Creativity",
        "red_blue": "Performance Authority",
        "red_black": "Performance Premium",
        "red_green": "Performance Growth",
        "red_purple": "Performance Innovation",
        "red_orange": "Dynamic Performance",
        "green_blue": "Growth Authority",
        "green_black": "Growth Premium",
        "green_red": "Growth Performance",
        "green_purple": "Sustainable Innovation",
        "green_orange": "Creative Growth",
        "purple_blue": "Innovative Authority",
        "purple_black": "Innovative Premium",
        "purple_red": "Innovative Performance",
        "purple_green": "Innovative Growth",
        "purple_orange": "Creative Innovation",
        "orange_blue": "Creative Authority",
        "orange_black": "Creative Premium",
        "orange_red": "Creative Performance",
        "orange_green": "Creative Growth",
        "orange_purple": "Visionary Creativity",
    },
}

BUILT_IN_DIAGNOSTICS = [BRANDPAWA_SCORE, COLOR_POWER_MATRIX]
