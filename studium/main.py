"""
Main entry point for Studium.
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

from .api.rest_api import StudiumRestAPI
from .config import load_config
from .core.directory import Directory
from .core.enums import UserRole
from .core.exceptions import ConfigurationError
from .core.grading import GradingStrategy
from .log import setup_logging

logger = logging.getLogger(__name__)


class StudiumPlatform:
    """Wires the directory, configuration and HTTP API together."""
    
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self._config = config or load_config(env={})
        self._directory = Directory(
            GradingStrategy.parse(self._config['default_grading_strategy'])
        )
        self._rest_api = StudiumRestAPI(self._directory)
    
    @property
    def directory(self) -> Directory:
        return self._directory
    
    @property
    def app(self):
        return self._rest_api.app
    
    def start_rest_server(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """Serve the REST API until interrupted."""
        import uvicorn
        
        host = host or self._config['host']
        port = port or self._config['port']
        logger.info("Starting REST server on %s:%s", host, port)
        uvicorn.run(self._rest_api.app, host=host, port=port,
                    log_level=self._config['log_level'].lower())
    
    def run_demo(self) -> List[Tuple[str, float]]:
        """Run the reference scenario and return the student's results."""
        directory = self._directory
        
        teacher = directory.register_user(UserRole.TEACHER, "Ana", "ana", "pw")
        course = directory.create_course("Algebra", "Linear equations and matrices", teacher)
        student = directory.register_user(UserRole.STUDENT, "Bob", "bob", "pw")
        
        course.register_student(directory.authenticate("bob", "pw"))
        directory.record_grade(teacher, course, student, 80, 1)
        directory.record_grade(teacher, course, student, 100, 1)
        directory.update_course_description(course, "Linear algebra for first-year students",
                                            actor=teacher)
        
        results = directory.student_results(student)
        print(f"Results for {student.name}:")
        for name, final in results:
            print(f"  {name}: {final:.2f}")
        print(f"Notifications for {student.name}:")
        for message in student.inbox:
            print(f"  {message}")
        return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Studium academic record keeper")
    parser.add_argument("--host", type=str, help="REST server host")
    parser.add_argument("--port", type=int, help="REST server port")
    parser.add_argument("--config", type=str, help="Configuration file path")
    parser.add_argument("--log-level", type=str, help="Logging level")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    parser.add_argument("--demo", action="store_true", help="Run the demo scenario and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    
    try:
        config = load_config(args.config, overrides={'log_level': args.log_level})
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2
    setup_logging(config['log_level'], json_output=args.json_logs)
    
    platform = StudiumPlatform(config)
    if args.demo:
        platform.run_demo()
        return 0
    
    try:
        platform.start_rest_server(args.host, args.port)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
