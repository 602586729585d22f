# ---- Machine layout ----
# Memory - can hold up to 4096 bytes which includes: the interpreter area, fonts, and the loaded ROM.
MEMORY_SIZE = 4096
PROGRAM_START = 0x200   # programs are loaded (and PC starts) here
FONT_START = 0x050      # font glyphs live inside the reserved 0x000-0x1FF area
FONT_GLYPH_SIZE = 5     # bytes per hex digit

NUM_REGISTERS = 16
NUM_KEYS = 16
STACK_DEPTH = 16

width, height = 64, 32

# ---- Front-end defaults ----
scale = 10
window_width, window_height = width * scale, height * scale
cpu_hz = 500
timer_HZ = 60

beep_frequency = 440
