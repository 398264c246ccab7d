import os
import copy
import yaml

DEFAULT_CONFIG = {
    'log_level': 'INFO',
    'log_dir': './logs',
    'console': {
        'enable': True,
        'level': 'INFO',
        'color': True
    },
    'file': {
        'enable': False,
        'level': 'DEBUG',
        'filename': 'lwserver.log',
        'when': 'midnight',    # 每日零点轮转
        'backupCount': 7,
        'maxBytes': 0,         # 0表示忽略，由when控制
        'formatter': 'json',   # plain 或 json
    }
}

ENV_PREFIX = 'LWSERVER_LOG_'


def load_yaml_config(path: str):
    if not os.path.exists(path):
        return {}
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def _parse_env_value(v):
    if v.lower() in ('true', 'false'):
        return v.lower() == 'true'
    if v.isdigit():
        return int(v)
    return v


def get_env_config():
    """从环境变量读取相关日志配置"""
    env_map = {
        'log_level': os.getenv(f'{ENV_PREFIX}LEVEL'),
        'log_dir': os.getenv(f'{ENV_PREFIX}DIR'),
        'console': {
            'enable': os.getenv(f'{ENV_PREFIX}CONSOLE_ENABLE'),
            'level': os.getenv(f'{ENV_PREFIX}CONSOLE_LEVEL'),
            'color': os.getenv(f'{ENV_PREFIX}CONSOLE_COLOR'),
        },
        'file': {
            'enable': os.getenv(f'{ENV_PREFIX}FILE_ENABLE'),
            'level': os.getenv(f'{ENV_PREFIX}FILE_LEVEL'),
            'filename': os.getenv(f'{ENV_PREFIX}FILE_FILENAME'),
            'when': os.getenv(f'{ENV_PREFIX}FILE_WHEN'),
            'backupCount': os.getenv(f'{ENV_PREFIX}FILE_BACKUPCOUNT'),
            'maxBytes': os.getenv(f'{ENV_PREFIX}FILE_MAXBYTES'),
            'formatter': os.getenv(f'{ENV_PREFIX}FILE_FORMATTER'),
        }
    }
    for section in ('console', 'file'):
        env_map[section] = {k: _parse_env_value(v)
                            for k, v in env_map[section].items() if v is not None}
    return {k: v for k, v in env_map.items() if v}


def merge_dict(d1, d2):
    # d2项覆盖d1
    for k, v in d2.items():
        if isinstance(v, dict) and isinstance(d1.get(k), dict):
            d1[k] = merge_dict(d1[k], v)
        else:
            d1[k] = v
    return d1


def get_final_config(path='logging_config.yaml'):
    file_config = load_yaml_config(path)
    env_config = get_env_config()
    config = merge_dict(copy.deepcopy(DEFAULT_CONFIG), file_config)
    config = merge_dict(config, env_config)
    return config
