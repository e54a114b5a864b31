# File Path: recordlock/manage.py
#!/usr/bin/env python
"""
文件说明: Django 管理入口 (Management Utility)
用法: python recordlock/manage.py test recordlock.tests
"""
import os
import sys
from pathlib import Path


def main():
    """Run administrative tasks."""
    # 1. 路径注入 (项目根目录，保证 import recordlock 可用)
    current_dir = Path(__file__).resolve().parent
    project_root = current_dir.parent
    sys.path.insert(0, str(project_root))

    # 2. 设置配置
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'recordlock.django_config.settings')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
