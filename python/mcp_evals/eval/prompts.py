"""Prompts for answering and grading."""

ANSWER_SYSTEM_PROMPT = (
    "You are an assistant responsible for evaluating the results of calling various tools. "
    "Given the user's query, use the tools available to you to answer the question."
)

# Used by grade() when no system prompt is supplied
DEFAULT_GRADING_PROMPT = """You are an expert evaluator assessing how well an LLM answers a given question. Review the provided answer and score it from 1 to 5 in each of the following categories:
        Accuracy - Does the answer contain factual errors or hallucinations?
        Completeness - Does the answer fully address all parts of the question?
        Relevance - Is the information directly related to the question?
        Clarity - Is the explanation easy to understand and well-structured?
        Reasoning - Does the answer show logical thinking or provide evidence or rationale?
        Return your evaluation as a JSON object in the format:
        {
            "accuracy": 1-5,
            "completeness": 1-5,
            "relevance": 1-5,
            "clarity": 1-5,
            "reasoning": 1-5,
            "overall_comments": "A short paragraph summarizing the strengths and weaknesses of the answer."
        }"""


def build_grading_prompt(prompt: str, answer: str) -> str:
    """Embed the user input and the model's answer for the grader."""
    return f"Here is the user input: {prompt}\nHere is the LLM's answer: {answer}"
