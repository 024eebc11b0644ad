"""OpenAI function-calling tool schemas for the negotiation tools."""

OPENAI_TOOL_SCHEMAS = [
    {
        "type": "function",
        "name": "calculate_license_price",
        "description": (
            "Calculates the license price from the producer's base price and the "
            "requested terms. Returns finalPrice, the multiplier breakdown and a "
            "reasoning line to show the buyer."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "usageRights": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Requested usage rights (YOUTUBE, TIKTOK, PODCAST, COMMERCIAL, STREAMING, FILM, BROADCAST)",
                },
                "exclusivity": {
                    "type": "boolean",
                    "description": "Whether the buyer wants an exclusive license",
                },
                "territory": {
                    "type": "string",
                    "enum": ["regional", "national", "worldwide"],
                    "description": "Territory of the license",
                },
                "duration": {
                    "type": "integer",
                    "description": "License duration in months; omit for perpetual",
                },
            },
            "required": ["usageRights"],
            "additionalProperties": False,
        },
    },
    {
        "type": "function",
        "name": "validate_usage_rights",
        "description": (
            "Checks the requested usage rights against the rights the producer "
            "allows. Returns valid, invalidRights and a message."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "requestedRights": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Usage rights the buyer asked for",
                },
            },
            "required": ["requestedRights"],
            "additionalProperties": False,
        },
    },
    {
        "type": "function",
        "name": "validate_price",
        "description": "Checks whether an offered price meets the producer's minimum.",
        "parameters": {
            "type": "object",
            "properties": {
                "offeredPrice": {
                    "type": "number",
                    "description": "Price offered by the buyer in USD",
                },
            },
            "required": ["offeredPrice"],
            "additionalProperties": False,
        },
    },
    {
        "type": "function",
        "name": "generate_contract",
        "description": (
            "Generates the final license contract once the buyer confirmed the "
            "terms. Call only after explicit agreement."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "price": {"type": "number", "description": "Agreed price in USD"},
                "usageRights": {"type": "array", "items": {"type": "string"}},
                "exclusivity": {"type": "boolean"},
                "territory": {"type": "string"},
                "duration": {
                    "type": "integer",
                    "description": "Duration in months; omit for perpetual",
                },
                "attribution": {"type": "boolean"},
                "customTerms": {"type": "string"},
            },
            "required": ["price", "usageRights"],
            "additionalProperties": False,
        },
    },
]

TOOL_ALIASES = {
    "calculate_price": "calculate_license_price",
    "validate_rights": "validate_usage_rights",
    "generate_license_contract": "generate_contract",
}


def canonical_tool_name(name: str) -> str:
    return TOOL_ALIASES.get(name, name)
