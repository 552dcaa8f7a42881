"""训练入口脚本，通过命令行参数加载配置并执行完整工作流。"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from canopy.orchestrator import run_workflow


def _parse_args() -> argparse.Namespace:
    """解析命令行参数。"""

    parser = argparse.ArgumentParser(
        description="传入 YAML 配置文件路径，训练分类模型并在验证集上评估。"
    )
    parser.add_argument(
        "--config",
        required=True,
        help="必填：配置文件路径，支持相对或绝对路径。",
    )
    return parser.parse_args()


def main() -> None:
    """脚本主函数，负责触发训练并输出评估指标。"""

    args = _parse_args()
    config_path = Path(args.config)
    if not config_path.exists():
        raise FileNotFoundError(f"配置文件不存在：{config_path}")

    metrics = run_workflow(str(config_path))
    # 中文说明：以 JSON 输出，便于脚本化解析。
    print(json.dumps(metrics, ensure_ascii=False, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
