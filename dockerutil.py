# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import base64
import json
import logging
import os
import subprocess
import tempfile
import typing

import ci.log
import optionutil

logger = logging.getLogger(__name__)
ci.log.configure_default_logging()


class DockerError(RuntimeError):
    pass


def image_reference(
    registry: str,
    image: str,
    version: str,
) -> str:
    return f'{registry.rstrip("/")}/{image}:{version}'


def build_args(options: typing.Iterable[str]) -> str:
    '''
    returns `--build-arg` options for the given `key=value` options, e.g.
    `--build-arg a=b --build-arg c=d`
    '''
    return optionutil.command_options(
        options=options,
        key_option='--build-arg ',
    )


def mk_docker_cfg_dir(
    cfg: dict,
    cfg_dir: str=None,
    exist_ok=False,
) -> str:
    '''
    creates a directory containing a `config.json` file as expected by docker
    the directory path is returned.
    if exist_ok evaluates to True, an existing `config.json` file will be overwritten.
    '''
    if cfg_dir and not exist_ok and os.path.exists(cfg_dir):
        raise RuntimeError(f'{cfg_dir=} must not exist')

    if not cfg_dir:
        cfg_dir = tempfile.mkdtemp() # cleanup must be done by caller
    else:
        os.makedirs(cfg_dir, exist_ok=True)

    docker_cfg_path = os.path.join(cfg_dir, 'config.json')

    with open(docker_cfg_path, 'w') as f:
        json.dump(cfg, f)
    os.chmod(docker_cfg_path, 0o600)

    return cfg_dir


def docker_login_cfg(
    registry: str,
    username: str,
    password: str,
    cfg_dir: str=None,
) -> str:
    '''
    creates a docker-cfg dir holding credentials for the given registry (equivalent to
    `docker login`, but w/o passing the password via ARGV). Use the returned dir as
    `--config` for subsequent docker commands.
    '''
    auth_str = f'{username}:{password}'
    auth_str = base64.b64encode(auth_str.encode('utf-8')).decode('utf-8')

    logger.info(f'logging in to {registry=} as {username=}')
    return mk_docker_cfg_dir(
        cfg={'auths': {registry: {'auth': auth_str}}},
        cfg_dir=cfg_dir,
        exist_ok=True,
    )


def docker_argv(
    *args: str,
    cfg_dir: str=None,
) -> tuple[str]:
    argv = ['docker']

    if cfg_dir:
        argv.extend(('--config', cfg_dir))

    argv.extend(args)

    return tuple(argv)


def _run(argv: typing.Sequence[str]):
    try:
        subprocess.run(
            argv,
            check=True,
            capture_output=True,
            text=True,
        )
    except subprocess.CalledProcessError as e:
        details = (e.stderr or e.stdout or '').strip()
        raise DockerError(f'{" ".join(argv)} failed: {details}') from e
    except FileNotFoundError as e:
        raise DockerError('docker executable not found in PATH') from e


def docker_push(
    image_ref: str,
    cfg_dir: str=None,
):
    logger.info(f'pushing {image_ref=}')
    _run(docker_argv('push', image_ref, cfg_dir=cfg_dir))
    logger.info(f'pushed {image_ref=}')
