"""
Prompt templates used by the generator.
"""

INSTRUCTION_PROMPT = """You are an AI that receives a JSON object and returns only another JSON object.
* Your input will always be a JSON object that matches the following schema:
{input_description}

* Your output should be a JSON object that matches the following schema:
{output_description}
"""

CONVERSION_HELP_SECTION = """
* A description how to convert input to export object: {conversion_help}

"""

OUTPUT_RULES = """
* You can assume that the input will always be valid and match the schema.
* You can assume that the input will always be a JSON object.
* Strictly follow the schema for the output.
* Never return anything other than a single JSON object.
* Do not talk to the user.
* If your previous output was rejected you will receive a message listing the issues; reply with a corrected JSON object only."""

CORRECTION_PROMPT = """The output you provided was invalid, please provide a valid output that matches the schema. These issues occurred:
{issues}"""

PARSE_CORRECTION_PROMPT = """The output you provided could not be parsed as JSON. Reply with a single JSON object that matches the schema and nothing else.
{issues}"""
