from typing import IO, List
from urllib.parse import quote

from deployctl.client import ApiClient
from deployctl.helper import download_file, parse_response
from deployctl.models import Example, OutputMode

URL_EXAMPLES = "/v2/examples"


def url_example_download(name: str):
    return f"{URL_EXAMPLES}/download/{quote(name, safe='')}.tar.gz"


def list_examples(client: ApiClient) -> List[Example]:
    response = client.get(f"{URL_EXAMPLES}/list")
    return parse_response(response, List[Example])


def download_example(
    client: ApiClient,
    name: str,
    file: IO[bytes],
    output_mode: OutputMode,
):
    url = url_example_download(name)
    download_file(f"Downloading {name}", url, file, client, output_mode)
