import time

from chip8vm import Chip8, display_to_text

# Counts V0 from 0 to F and redraws it as a hex digit on every pass.
COUNTER_ROM = bytes([
    0x00, 0xE0,  # 200: CLS
    0xF0, 0x29,  # 202: LD F, V0
    0xD1, 0x15,  # 204: DRW V1, V1, 5
    0x70, 0x01,  # 206: ADD V0, 1
    0x40, 0x10,  # 208: SNE V0, 0x10
    0x60, 0x00,  # 20A: LD V0, 0
    0x12, 0x00,  # 20C: JP 200
])

if __name__ == "__main__":
    machine = Chip8(seed=0)
    machine.load(COUNTER_ROM)

    # First tick compiles the instruction kernel
    start_compile = time.time()
    machine.tick()
    end_compile = time.time()

    print("Compilation time (s):", end_compile - start_compile)

    start_exec = time.time()
    for _ in range(60):
        machine.run_frame(10)
    end_exec = time.time()

    print("Execution time (s):", end_exec - start_exec)
    print("Instructions:", machine.cycles)

    print(display_to_text(machine.read_display()))
