from __future__ import annotations

import logging
from typing import IO, TYPE_CHECKING, Any, Dict, Iterator, Optional, Type

import typer
from httpx import Response
from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import APIError, AuthError, DeployctlError, InternalError
from .models import OutputMode

if TYPE_CHECKING:
    from .client import ApiClient

logger = logging.getLogger(__name__)


class ErrorModel(BaseModel):
    code: str
    message: str


_STATUS_CODES = [200, 201, 202, 204]


def is_success(response: Response):
    return response.status_code in _STATUS_CODES


def parse_error_and_raise(response: Response, json_data: Any):

    if response.status_code == 401:  # Unauthorized
        raise AuthError()

    try:
        error = ErrorModel.model_validate(json_data["error"])

    except (KeyError, TypeError, ValidationError) as e:
        logger.debug("Unexpected error body [%d]: %r", response.status_code, json_data)
        raise InternalError() from e

    raise APIError(error.code, error.message, response.status_code)


def parse_stream_response(response: Response):

    if is_success(response):
        return response.iter_bytes()

    try:
        response.read()
        json_data = response.json()

    except ValueError as e:
        logger.debug("Non-JSON error body [%d]", response.status_code)
        raise InternalError() from e

    parse_error_and_raise(response, json_data)


def parse_response(
    response: Response,
    model: Any,
    key: Optional[str] = None,
):
    """
    Decodes JSON body of the response into the model.
    If key is set, only the value under that key is decoded
    """

    try:
        json_data = response.json()

        if not is_success(response):
            parse_error_and_raise(response, json_data)

        if key is not None:
            json_data = json_data[key]

        data = TypeAdapter(model).validate_python(json_data)

    except ValidationError as e:
        logger.debug("Response model mismatch: %s", e)
        raise InternalError() from e

    except ValueError as e:
        logger.debug("Response is not a valid JSON: %s", e)
        raise InternalError() from e

    except (KeyError, TypeError) as e:
        logger.debug("Response has unexpected structure: %r", e)
        raise InternalError() from e

    return data


def parse_response_no_model(response: Response):

    if is_success(response) and not response.content:
        return None

    return parse_response(response, Dict[str, Any])


def paginate(
    client: ApiClient,
    url: str,
    model: Type[BaseModel],
    key: str,
    params: Optional[Dict[str, Any]] = None,
    max_items: Optional[int] = None,
    follow: bool = True,
    page_size: int = 100,
) -> Iterator[BaseModel]:

    """
    Iterates over items of cursor-paginated collection.
    The cursor of the next page is taken from 'pagination.next'
    and passed back as 'until' query parameter
    """

    until = None
    count = 0

    try:
        while True:

            query = dict(params or {})
            query["limit"] = page_size
            if max_items is not None:
                query["limit"] = min(page_size, max_items - count)

            if until is not None:
                query["until"] = until

            # Fetch next page
            response = client.get(url, params=query)

            # Ensure no errors occurred
            json_data = response.json()
            if not is_success(response):
                parse_error_and_raise(response, json_data)

            items = json_data[key]
            pagination = json_data.get("pagination") or {}

            # Items must be a list
            if not isinstance(items, list):
                raise ValueError(f"'{key}' is not a list")

            # No items in page -> exit
            if not items:
                break

            for item in items:
                yield model.model_validate(item)
                count += 1

                if max_items is not None and count >= max_items:
                    return

            # No cursor -> the last page
            until = pagination.get("next")
            if not follow or until is None:
                break

    except ValidationError as e:
        logger.debug("Page item model mismatch: %s", e)
        raise InternalError() from e

    except ValueError as e:
        logger.debug("Page is not valid: %s", e)
        raise InternalError() from e

    except (KeyError, TypeError) as e:
        logger.debug("Page has unexpected structure: %r", e)
        raise InternalError() from e


def download_progressbar(label: str, stream: Iterator[bytes], length: int):
    with typer.progressbar(length=length, label=label) as progress:
        for chunk in stream:
            progress.update(len(chunk))
            yield chunk


def download_file(
    label: str,
    url: str,
    file: IO[bytes],
    client: ApiClient,
    output_mode: OutputMode,
):
    with client.stream("GET", url) as response:
        stream = parse_stream_response(response)

        try:
            file_size = int(response.headers["Content-Length"])
        except (KeyError, ValueError):
            file_size = None

        def streaming_download(chunks: Iterator[bytes]):
            if output_mode == OutputMode.human and file_size is not None:
                for chunk in download_progressbar(label, chunks, file_size):
                    yield chunk
            else:
                for chunk in chunks:
                    yield chunk

        try:
            for chunk in streaming_download(stream):
                file.write(chunk)

        except OSError as e:
            msg = f"Failed to write downloaded data: '{url}'"
            raise DeployctlError(msg) from e
