# main.py

import pygame
import constants
import logging
import logger_setup
import numpy as np
from config import load_config
from scene import Scene

# Get the application's dedicated logger
logger = logging.getLogger("fireworks")

import cProfile, pstats


def apply_bloom(screen, scene, size):
    """
    Draws a blurred, dimmed copy of the scene additively over the screen.
    The blur is a cheap downscale/upscale pair.
    """
    width, height = size
    glow_surface = pygame.Surface(size, pygame.SRCALPHA)
    scene.draw(glow_surface)

    scale = constants.BLOOM_RADIUS
    scaled_size = (max(1, width // scale), max(1, height // scale))
    scaled_surface = pygame.transform.smoothscale(glow_surface, scaled_size)
    blurred_surface = pygame.transform.smoothscale(scaled_surface, size)

    intensity = constants.BLOOM_INTENSITY
    blurred_surface.fill((intensity, intensity, intensity), special_flags=pygame.BLEND_RGB_MULT)
    screen.blit(blurred_surface, (0, 0), special_flags=pygame.BLEND_RGB_ADD)


def run_show_loop(scene, screen, clock, fireworks_config):
    """
    The main frame loop. One iteration is one tick: sample input, advance the
    scene, then render with the sky fade and optional bloom.
    """
    running = True
    bloom = fireworks_config['bloom']
    stats_interval = fireworks_config['stats_interval']
    max_ticks = fireworks_config['max_ticks']
    size = screen.get_size()
    trail_surface = pygame.Surface(size, pygame.SRCALPHA)

    while running and (max_ticks <= 0 or scene.tick < max_ticks):
        # --- Event handling ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen = pygame.display.get_surface()
                size = screen.get_size()
                trail_surface = pygame.Surface(size, pygame.SRCALPHA)
                scene.on_resize(*size)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                scene.on_pointer_down(*event.pos)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                else:
                    scene.on_key(event.unicode)

        # --- Simulation ---
        scene.update()

        # --- Logging (throttled) ---
        if stats_interval > 0 and scene.tick % stats_interval == 0:
            logger.debug(", ".join(f"{key}={value}" for key, value in scene.stats().items()))

        # --- Drawing ---
        # The translucent fill leaves fading trails behind everything.
        trail_surface.fill(constants.TRAIL_EFFECT_COLOR)
        screen.blit(trail_surface, (0, 0))

        if bloom:
            apply_bloom(screen, scene, size)

        scene.draw(screen)
        pygame.display.flip()
        clock.tick(constants.FPS)


def main():
    """
    Main function to initialize and run the fireworks show.
    With "profile" enabled in config.json the loop runs under cProfile.
    """
    # --- Setup ---
    try:
        config = load_config()
    except (OSError, ValueError) as e:
        logging.basicConfig()
        logger.error(f"Cannot start: {e}")
        raise SystemExit(1)

    logger_setup.setup_logging(config)
    fireworks_config = config['fireworks']

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")

    # Initialize the master random number generator (RNG)
    rng = np.random.default_rng(config['master_seed'])
    logger.info(f"Master RNG initialized with seed: {config['master_seed']}")

    # --- Initialization ---
    pygame.init()
    screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT), pygame.RESIZABLE)
    pygame.display.set_caption(constants.TITLE)
    screen.fill(constants.BLACK)
    clock = pygame.time.Clock()

    scene = Scene(fireworks_config, rng, screen.get_size())

    if fireworks_config['profile']:
        profiler = cProfile.Profile()
        profiler.enable()
        run_show_loop(scene, screen, clock, fireworks_config)
        profiler.disable()
        logger.info("Profiling complete. Printing stats...")
        stats = pstats.Stats(profiler).sort_stats('cumtime')
        stats.print_stats(20)  # Print the top 20 time-consuming functions
    else:
        run_show_loop(scene, screen, clock, fireworks_config)

    logger.info(f"Application shutting down after {scene.tick} ticks.")
    pygame.quit()


if __name__ == "__main__":
    main()
