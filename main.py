"""
CHIP-8 desktop frontend (pygame) and headless runner
"""

import argparse
import time

import numpy as np
import pygame

from chip8vm import Chip8, Chip8Error, format_instruction
from chip8vm.logging import MachineLogger
from chip8vm.rendering import chip8_display_to_rgb, create_color_scheme, save_frame
from chip8vm.runner import run_frame, run_headless

# Original COSMAC VIP keypad layout mapped onto the left side of a QWERTY keyboard:
# 1 2 3 C      1 2 3 4
# 4 5 6 D  ->  Q W E R
# 7 8 9 E      A S D F
# A 0 B F      Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

BEEP_FREQUENCY = 440
SAMPLE_RATE = 44100


class Beeper:
    """Square-wave tone played while the sound timer is running."""

    def __init__(self, logger):
        self.sound = None
        self.playing = False
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        except pygame.error as e:
            logger.warning(f"Audio disabled: {e}")
            return
        period = SAMPLE_RATE // BEEP_FREQUENCY
        wave = np.where(np.arange(SAMPLE_RATE) % period < period // 2, 4096, -4096).astype(np.int16)
        channels = pygame.mixer.get_init()[2]
        if channels > 1:
            wave = np.repeat(wave[:, None], channels, axis=1)
        self.sound = pygame.sndarray.make_sound(wave)

    def update(self, active: bool):
        if self.sound is None or active == self.playing:
            return
        if active:
            self.sound.play(loops=-1)
        else:
            self.sound.stop()
        self.playing = active


def draw_overlay_text(surface, text_lines, position, font, bg_color=(0, 0, 0), text_color=(255, 255, 255), alpha=120):
    """Draw text with semi-transparent background overlay"""
    if not text_lines:
        return

    line_height = font.get_height()
    max_width = max(font.size(line)[0] for line in text_lines)
    overlay = pygame.Surface((max_width + 16, len(text_lines) * line_height + 8))
    overlay.set_alpha(alpha)
    overlay.fill(bg_color)
    surface.blit(overlay, position)

    x, y = position
    for i, line in enumerate(text_lines):
        text_surface = font.render(line, True, text_color)
        surface.blit(text_surface, (x + 8, y + 4 + i * line_height))


def debug_lines(machine):
    word = machine.next_instruction()
    lines = [
        f"PC: 0x{machine.pc:03X}  {format_instruction(word) if word is not None else '--'}",
        f"I: 0x{machine.index_register:03X}  SP: {machine.stack_pointer}",
        f"DT: {machine.delay_timer}  ST: {machine.sound_timer}",
    ]
    registers = machine.registers
    for i in range(0, 16, 4):
        lines.append(" ".join(f"V{j:X}:{registers[j]:02X}" for j in range(i, i + 4)))
    return lines


def run_emulator(rom_filename, scale=10, ipf=10, fps=60, color_scheme="classic", seed=None, logger=None):
    """Main emulator loop: ipf instructions, one timer tick and one redraw per frame"""
    logger = logger or MachineLogger("Desktop")
    on_color, off_color = create_color_scheme(color_scheme)

    machine = Chip8(seed=seed, logger=logger)
    with open(rom_filename, "rb") as f:
        rom_data = f.read()
    machine.load(rom_data)

    pygame.init()
    screen = pygame.display.set_mode((64 * scale, 32 * scale))
    pygame.display.set_caption(f"CHIP-8 - {rom_filename}")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 18)
    beeper = Beeper(logger)

    running = True
    paused = False
    show_debug = False
    fault = None
    frame_count = 0
    fps_start_time = time.time()

    logger.info("Controls: ESC=Quit, P=Pause, Backspace=Reset, F1=Debug, +/-=Speed")

    while running:
        clock.tick(fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                elif event.key == pygame.K_F1:
                    show_debug = not show_debug
                elif event.key == pygame.K_BACKSPACE:
                    machine.reset()
                    machine.load(rom_data)
                    fault = None
                    logger.info("Reset")
                elif event.key == pygame.K_EQUALS:
                    ipf = min(100, ipf + 2)
                    logger.info(f"Speed: {ipf} IPF")
                elif event.key == pygame.K_MINUS:
                    ipf = max(1, ipf - 2)
                    logger.info(f"Speed: {ipf} IPF")
                elif event.key in KEY_MAP:
                    machine.set_key(KEY_MAP[event.key], True)
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    machine.set_key(KEY_MAP[event.key], False)

        if not paused and fault is None:
            try:
                run_frame(machine, ipf)
            except Chip8Error as e:
                fault = e
                logger.log_registers(machine.state, level="ERROR")

        beeper.update(machine.sound_active and not paused and fault is None)

        rgb = chip8_display_to_rgb(machine.framebuffer(), scale, on_color, off_color)
        pygame.surfarray.blit_array(screen, rgb.transpose(1, 0, 2))

        if show_debug:
            draw_overlay_text(screen, debug_lines(machine), (5, 5), font, alpha=100)
        if fault is not None:
            draw_overlay_text(screen, [f"HALTED: {fault}"], (5, 32 * scale - 30), font, text_color=(255, 80, 80))
        elif paused:
            draw_overlay_text(screen, ["PAUSED - P to resume"], (5, 32 * scale - 30), font, text_color=(255, 255, 0))

        pygame.display.flip()

        frame_count += 1
        if time.time() - fps_start_time >= 5.0:
            logger.debug(f"{frame_count / (time.time() - fps_start_time):.1f} FPS at {ipf} IPF")
            frame_count = 0
            fps_start_time = time.time()

    pygame.quit()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a CHIP-8 ROM")
    parser.add_argument("rom", type=str, help="Path to the ROM file")
    parser.add_argument("--scale", type=int, default=10, help="Window pixels per CHIP-8 pixel (default: 10)")
    parser.add_argument("--ipf", type=int, default=10, help="Instructions per frame (default: 10)")
    parser.add_argument("--fps", type=int, default=60, help="Frames per second (default: 60)")
    parser.add_argument(
        "--color-scheme",
        type=str,
        default="classic",
        choices=["classic", "amber", "white", "blue", "retro"],
        help="Display colors (default: classic)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for CXNN (default: random)")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument("--frames", type=int, default=600, help="Frames to run in headless mode (default: 600)")
    parser.add_argument("--screenshot", type=str, default=None, help="Save the last headless frame to this image")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level (default: INFO)",
    )
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    logger = MachineLogger("Chip8", log_level=args.log_level)

    if args.headless:
        try:
            machine = run_headless(args.rom, args.frames, args.ipf, seed=args.seed, logger=logger)
        except Chip8Error as e:
            logger.critical(f"Run aborted: {e}")
            raise SystemExit(1)
        if args.screenshot:
            save_frame(machine.framebuffer(), args.screenshot, scale=args.scale, color_scheme=args.color_scheme)
            logger.info(f"Saved {args.screenshot}")
    else:
        run_emulator(args.rom, args.scale, args.ipf, args.fps, args.color_scheme, args.seed, logger)
