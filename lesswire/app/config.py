import copy
import json

DEFAULT_SETTINGS = {
    'debug': False,
    'paths': {
        'assets': 'assets'
    },
    'modules': [],
    'less': {},
    'admin_style': {
        'style': None,
        'template': 'admin',
        'vars': {}
    }
}


def merge_settings(target, source):
    """
    Merge settings into a target dictionary, in place. Dictionaries are merged and lists are appended to, unless the
    key ends with '!', in which case the value replaces the target's value.

    :param target: Settings to update.
    :type target: dict
    :param source: Settings to merge in.
    :type source: dict
    :return: The updated target.
    :rtype: dict
    """
    for key, value in source.items():
        override = key.endswith('!')
        key = key.rstrip('!')
        in_target = key in target

        if isinstance(value, dict):
            if override or not in_target or not isinstance(target[key], dict):
                target[key] = {}
            merge_settings(target[key], value)
            continue
        elif not override and in_target and isinstance(value, list) and isinstance(target[key], list):
            target[key] = target[key] + value
            continue
        target[key] = value
    return target


def load_settings(path):
    """
    Load a JSON settings file over the default settings.

    :param path: Settings file path.
    :type path: str
    :rtype: dict
    :raises ValueError: If the file is not valid JSON, or is not a JSON object.
    """
    with open(path, encoding='utf-8') as fh:
        loaded = json.load(fh)
    if not isinstance(loaded, dict):
        raise ValueError('Settings must be a JSON object')
    return merge_settings(copy.deepcopy(DEFAULT_SETTINGS), loaded)
