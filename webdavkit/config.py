"""
Connection parameters from arguments, environment and configuration file.

The configuration file is JSON, a dict of named sections:

    {
        "default": {"url": "https://dav.example.com/files/", "username": "tobias"},
        "work": {"inherits": "default", "url": "https://dav.example.org/"}
    }

A section may name one other section in "inherits"; its keys are used
unless the section itself overrides them.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from webdavkit.client import AsyncWebDAVClient, WebDAVClient

log = logging.getLogger("webdavkit")

## keys from a config section that are passed on to the client
CONNECTION_KEYS = ("url", "username", "password", "headers", "timeout", "ssl_verify_cert")


def config_section(config: Dict[str, Any], section: str = "default") -> Dict[str, Any]:
    if section in config and "inherits" in config[section]:
        ret = config_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    ret.pop("inherits", None)
    return ret


def read_config(fn: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Read a JSON config file.  Without a file name, a few standard
    locations are tried and the first one found is used.

    Returns:
        The parsed config, {} if the file is missing or broken, None if
        no file name was given and none of the standard locations exist
    """
    if not fn:
        cfgdir = f"{os.environ.get('HOME', '/')}/.config"
        for config_file in (
            f"{cfgdir}/webdavkit/config.json",
            f"{cfgdir}/webdavkit.json",
            "/etc/webdavkit/config.json",
        ):
            cfg = read_config(config_file)
            if cfg:
                return cfg
        return None

    try:
        with open(fn, "rb") as config_file:
            return json.load(config_file)
    except FileNotFoundError:
        log.debug(f"no config file found at {fn}")
    except ValueError:
        log.error(f"error in config file {fn}.  It will be ignored", exc_info=True)
    return {}


def connection_params(
    url: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    config_file: Optional[str] = None,
    section: Optional[str] = None,
    **kwargs: Any,
) -> Dict[str, Any]:
    """
    Collect the connection parameters.  Explicit arguments beat the
    WEBDAV_URL, WEBDAV_USERNAME and WEBDAV_PASSWORD environment
    variables, which beat the config file.

    Raises:
        ValueError: If no URL can be found anywhere
    """
    config_file = config_file or os.environ.get("WEBDAV_CONFIG_FILE")
    section = section or os.environ.get("WEBDAV_CONFIG_SECTION", "default")
    config = read_config(config_file) or {}
    params = {
        key: value
        for key, value in config_section(config, section).items()
        if key in CONNECTION_KEYS
    }

    for key, explicit, env in (
        ("url", url, "WEBDAV_URL"),
        ("username", username, "WEBDAV_USERNAME"),
        ("password", password, "WEBDAV_PASSWORD"),
    ):
        value = explicit if explicit is not None else os.environ.get(env)
        if value is not None:
            params[key] = value
    params.update(kwargs)

    if not params.get("url"):
        raise ValueError(
            "URL is required. Provide via url parameter, the WEBDAV_URL "
            "environment variable or a config file."
        )
    return params


def get_client(
    url: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    config_file: Optional[str] = None,
    section: Optional[str] = None,
    **kwargs: Any,
) -> WebDAVClient:
    """
    Get a WebDAVClient, see connection_params() for where the
    parameters come from.  Extra keyword arguments go to the client.
    """
    params = connection_params(url, username, password, config_file, section, **kwargs)
    log.debug(f"connecting to {params['url']}")
    return WebDAVClient(**params)


def get_async_client(
    url: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    config_file: Optional[str] = None,
    section: Optional[str] = None,
    **kwargs: Any,
) -> AsyncWebDAVClient:
    """Async counterpart of get_client()"""
    params = connection_params(url, username, password, config_file, section, **kwargs)
    log.debug(f"connecting to {params['url']}")
    return AsyncWebDAVClient(**params)
