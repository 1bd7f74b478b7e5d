import requests

FAILURE_MESSAGE = "Failed to process question"


def ask_question(api_url: str, question: str, timeout: float = 60) -> str:
    """
    Posts one question to the backend.

    Always returns displayable text: the answer, or FAILURE_MESSAGE when the
    request fails or the backend answers with an error payload.
    """
    try:
        r = requests.post(
            f"{api_url.rstrip('/')}/ask",
            json={"question": question},
            timeout=timeout,
        )
        data = r.json()
    except (requests.exceptions.RequestException, ValueError):
        return FAILURE_MESSAGE

    if not isinstance(data, dict):
        return FAILURE_MESSAGE

    answer = data.get("answer")
    if r.status_code != 200 or not isinstance(answer, str):
        return FAILURE_MESSAGE

    return answer
