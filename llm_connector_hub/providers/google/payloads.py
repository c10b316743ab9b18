"""Unified request to Gemini generateContent payload."""

import json
import mimetypes
from typing import Any, Dict, List, Optional, Tuple

from ...core.normalization.messages import extract_text_content, parse_data_url, split_system_messages
from ...models.generation import CompletionRequest
from ...models.messages import FunctionDefinition, ImageBase64Part, Message, MessageRole, TextPart
from .config import SafetySetting


def format_parts(content) -> List[Dict[str, Any]]:
    if isinstance(content, str):
        return [{"text": content}] if content else []

    parts: List[Dict[str, Any]] = []
    for part in content:
        if isinstance(part, TextPart):
            parts.append({"text": part.text})
        elif isinstance(part, ImageBase64Part):
            parts.append({"inlineData": {"mimeType": part.media_type, "data": part.image_base64}})
        else:
            decoded = parse_data_url(part.image_url)
            if decoded:
                media_type, data = decoded
                parts.append({"inlineData": {"mimeType": media_type, "data": data}})
            else:
                media_type = mimetypes.guess_type(part.image_url)[0] or "image/jpeg"
                parts.append({"fileData": {"mimeType": media_type, "fileUri": part.image_url}})
    return parts


def _arguments(arguments: str) -> Dict[str, Any]:
    if not arguments:
        return {}
    try:
        value = json.loads(arguments)
    except ValueError:
        return {"arguments": arguments}
    return value if isinstance(value, dict) else {"value": value}


def format_contents(messages: List[Message]) -> Tuple[Optional[str], List[Dict[str, Any]]]:
    """
    Convert the conversation to Gemini ``contents``.

    Assistant turns use role ``model``. Tool results become
    ``functionResponse`` parts on a user turn; the function name is looked
    up from the assistant tool call they answer.
    """
    system, conversation = split_system_messages(messages)
    call_names: Dict[str, str] = {}
    contents: List[Dict[str, Any]] = []

    for message in conversation:
        if message.role in (MessageRole.TOOL, MessageRole.FUNCTION):
            part = {
                "functionResponse": {
                    "name": call_names.get(message.tool_call_id) or message.name or message.tool_call_id,
                    "response": {"result": extract_text_content(message)},
                }
            }
            previous = contents[-1] if contents else None
            if previous and previous["role"] == "user" and all("functionResponse" in p for p in previous["parts"]):
                previous["parts"].append(part)
            else:
                contents.append({"role": "user", "parts": [part]})
            continue

        parts = format_parts(message.content)
        if message.role == MessageRole.ASSISTANT:
            for call in message.tool_calls or []:
                call_names[call.id] = call.function.name
                parts.append({
                    "functionCall": {"name": call.function.name, "args": _arguments(call.function.arguments)}
                })
            contents.append({"role": "model", "parts": parts})
        else:
            contents.append({"role": "user", "parts": parts})

    return system, contents


def format_function(definition: FunctionDefinition) -> Dict[str, Any]:
    declaration: Dict[str, Any] = {"name": definition.name}
    if definition.description:
        declaration["description"] = definition.description
    # object schemas without properties are rejected
    if definition.parameters.get("properties"):
        declaration["parameters"] = definition.parameters
    return declaration


def build_generate_payload(
    request: CompletionRequest,
    max_tokens: int,
    safety_settings: Optional[List[SafetySetting]] = None,
) -> Dict[str, Any]:
    system, contents = format_contents(request.messages)

    generation_config: Dict[str, Any] = {"maxOutputTokens": max_tokens}
    if request.temperature is not None:
        generation_config["temperature"] = request.temperature
    if request.top_p is not None:
        generation_config["topP"] = request.top_p
    if request.top_k is not None:
        generation_config["topK"] = request.top_k
    stop = request.stop_sequences()
    if stop:
        generation_config["stopSequences"] = stop
    if request.seed is not None:
        generation_config["seed"] = request.seed

    payload: Dict[str, Any] = {"contents": contents, "generationConfig": generation_config}
    if system:
        payload["systemInstruction"] = {"parts": [{"text": system}]}

    definitions = request.function_definitions()
    if definitions:
        payload["tools"] = [{"functionDeclarations": [format_function(d) for d in definitions]}]

    if safety_settings:
        payload["safetySettings"] = [setting.model_dump() for setting in safety_settings]
    return payload
