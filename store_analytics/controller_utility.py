import datetime
import logging
import traceback
from json import JSONEncoder

import requests
import yaml
from yaml import SafeLoader
from yaml._yaml import ScannerError

logger = logging.getLogger(__name__)


class Encoder(JSONEncoder):
    def default(self, o):
        if isinstance(o, (datetime.date, datetime.datetime)):
            return o.isoformat()
        return o.__dict__


class SafeLineLoader(SafeLoader):
    def construct_mapping(self, node, deep=False):
        mapping = super(SafeLineLoader, self).construct_mapping(node, deep=deep)
        # Add 1 so line numbering starts at 1
        mapping['__line__'] = node.start_mark.line + 1
        return mapping


def _parse_yaml(content: str, source: str):
    try:
        return yaml.load(content, SafeLineLoader)
    except (ScannerError, yaml.YAMLError) as e:
        logging.error(e, exc_info=True)
        error_message = traceback.format_exc().split('.yaml')[-1].replace(',', '').replace('"', '')
        raise ValueError(f"Could not build store report due to incorrect yaml from {source}, "
                         f"caused due to error in {error_message}")


def load_yaml_from_stream(config_file):
    """
    Load a store report config from an uploaded file or any readable stream.

    Raises:
        ValueError: If the content is not valid YAML.
    """
    content = config_file.read()
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    return _parse_yaml(content, getattr(config_file, 'filename', None) or 'stream')


def load_yaml_from_url(url: str):
    """
    Fetch and load a store report config from a URL.

    Raises:
        ConnectionError: If the config cannot be fetched.
        ValueError: If the content is not valid YAML.
    """
    try:
        response = requests.get(url, allow_redirects=True)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to fetch config file from URL: {url}. Error: {e}", exc_info=True)
        raise ConnectionError(f"Failed to fetch config file from URL: {url}")
    # Convert bytes to string
    content = response.content.decode("utf-8")
    logger.info(f"Successfully fetched config file from URL: {url}")
    return _parse_yaml(content, url)
