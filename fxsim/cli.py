"""
Command-line entry point: run one descent session and print the result.
"""

import argparse
import logging
import sys
from typing import List, Optional

from fxsim.config_manager import ConfigManager
from fxsim.engine.controller import IterationController
from fxsim.engine.simulation_engine import SimulationEngine
from fxsim.fixed_point import to_float
from fxsim.logging_config import setup_logging
from fxsim.models.session import SessionConfig
from fxsim.reference import reference_descent

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fxsim-run',
        description='Fixed-point gradient descent on z = (a-2)^2 + b^2 + (c+2)^2 + (2d)^2 - 5',
    )
    parser.add_argument('--config', help='Path to a JSON configuration file')
    parser.add_argument('--params', type=int, nargs=4, metavar=('A', 'B', 'C', 'D'),
                        help='Initial int8 parameters (overrides session.initial_params)')
    parser.add_argument('--max-iterations', type=int,
                        help='Iteration cap (overrides session.max_iterations)')
    parser.add_argument('--reference', action='store_true',
                        help='Also run the float64 reference model and print the difference')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log every transition')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = ConfigManager(args.config)
    level_name = 'DEBUG' if args.verbose else str(config.get('logging.level', 'INFO')).upper()
    log_file = config.get('logging.log_file') if config.get('logging.log_to_file') else None
    setup_logging(level=getattr(logging, level_name, logging.INFO), log_file=log_file)

    if args.max_iterations is not None:
        config.set('session.max_iterations', args.max_iterations)
    if args.params is not None:
        config.set('session.initial_params', list(args.params))

    ok, errors = config.validate_config()
    if not ok:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        return 2

    try:
        session_config = SessionConfig.from_config_manager(config)
    except ValueError as e:
        logger.error(str(e))
        return 2

    initial = config.get('session.initial_params', [0, 0, 0, 0])
    controller = IterationController(session_config)
    engine = SimulationEngine(controller, max_ticks=config.get('simulation.max_ticks'))
    result = engine.run(initial)

    if not result.done:
        logger.error(engine.error_msg)
        return 1

    print(f"min value:      {result.min_value_float:.6f} (raw {result.min_value})")
    print(f"optimal params: {result.optimal_params}")
    print(f"iterations:     {result.iterations} ({'converged' if result.converged else 'iteration cap'})")
    print(f"ticks:          {result.ticks}")
    if result.overflow:
        print("overflow:       saturation occurred during the session")

    if args.reference:
        ref = reference_descent(
            initial,
            [to_float(lr) for lr in session_config.learning_rates],
            to_float(session_config.window.lower),
            to_float(session_config.window.upper),
            session_config.max_iterations,
        )
        print(f"reference min:  {ref.min_value:.6f} at {ref.optimal_params} "
              f"({ref.iterations} iterations)")
        print(f"difference:     {result.min_value_float - ref.min_value:+.6f}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
