# main.py
"""
Main entry point for the Pinkboard particle effect.

This script orchestrates the application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Builds the particle pool, heart curve, window and sprite.
4. Starts the animation driver and runs the frame loop.
5. Handles clean shutdown.
"""
import cProfile
import io
import logging
import pstats

from utils import setup_logging, load_config


def main(config_path: str = 'config.json'):
    """
    The main function to run the particle effect.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Pinkboard Starting ---")

    particle_params = config.get('particles', {})
    window_params = config.get('window', {})
    run_params = config.get('run_control', {})

    from particle import ParticleConfig, ParticlePool
    from heart import HeartCurve
    from simulation import AnimationDriver
    from visualization import Visualizer
    from constants import LOG_THROTTLE_FRAMES

    # --- Component Initialization ---
    particle_config = ParticleConfig.from_dict(particle_params)
    pool = ParticlePool(particle_config)
    curve = HeartCurve(seed=run_params.get('seed'))

    # The sprite is converted to the display format, so the window comes first.
    visualizer = Visualizer(window_params)
    sprite = visualizer.create_sprite(particle_config.sprite_size)

    driver = AnimationDriver(
        pool,
        curve,
        visualizer.surface,
        visualizer.scheduler,
        sprite,
        particle_config,
        log_throttle_frames=run_params.get('log_throttle_frames', LOG_THROTTLE_FRAMES),
    )

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    if profiler:
        profiler.enable()
    try:
        driver.start()
        frames = visualizer.run(driver, max_frames=run_params.get('max_frames'))
        logging.info(f"Frame loop finished after {frames} frames.")
    finally:
        if profiler:
            profiler.disable()
        driver.stop()
        visualizer.close()

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Pinkboard Shutting Down ---")


if __name__ == "__main__":
    main()
