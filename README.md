# brokenithm

A small controller server for four-lane rhythm games. A phone or tablet opens
a web page served by this package, touches on the screen are sent over a
WebSocket, and the server keeps the current state of the four buttons as a bit
mask. A keyboard simulator turns changes in that bit mask into key-down and
key-up events (`A`, `D`, `J`, `L` in the default mania layout).

## Pieces

- `brokenithm.server.BrokenithmServer(port, root="res/www/", host=None)`
  serves `index.html` (at `/`), `config.js`, `app.js` and `favicon.ico` from
  the `root` directory and accepts controller connections on `/ws`. Text
  messages of the form `b1010` set the four buttons (a `1` marks a pressed
  button); `alive?` is answered with `alive`; anything else is ignored.
  - `start_server()` runs the server in a background thread and returns
    whether it is listening; `stop_server()` closes all connections and waits
    for the thread. The server also works as a context manager.
  - `controller_state()` returns the latest button bit mask.
  - `handle_message(message)` applies one text message and returns the reply,
    if any; `create_app()` builds the `aiohttp` application.
  - With `port=0` a free port is chosen and `port` is updated once listening.
- `brokenithm.server.parse_button_message(message)` returns the indices of the
  pressed buttons in a `bXXXX` message, or `None` for any other message.
- `brokenithm.controller_state.ControllerState` builds a frame of buttons with
  `start()` and `add_button(i)`, publishes it with `end()`, and exposes the
  last published bit mask as `button_state`. `button_bit(i)` gives the mask
  for one button (0 to 63; other indices raise `IndexError`).
- `brokenithm.keyboard.KeyboardSimulator(layout=KeyboardLayout.MANIA,
  sender=None)` compares each new bit mask given to `send(keys)` with the
  previous one and produces `KeyEvent(key, up)` values for the buttons that
  changed. Each non-empty batch is passed to `sender`; without a sender the
  batches are collected in the `sent` list. `delay(millis)` sleeps.
  `key_events(previous, keys, layout)` computes the same events without
  sending them. Keys are virtual key codes, e.g. `ord("A")`.
- `brokenithm.file_streamer.FileStreamer(root)` indexes every file under a
  root directory by URL (`/index.html` is registered as `/`); `find(url)`
  returns its `FileReader` and `read(url)` returns the whole file, raising
  `FileNotFoundError` for unknown URLs. `FileReader` reads a file in cached
  chunks of 1 MiB by default (`peek`, `read`, `chunks`).
- `brokenithm.network.get_ip_addresses()` lists the IPv4 addresses of this
  machine, or an empty list if they cannot be found.

## Example

```python
from brokenithm.keyboard import KeyboardSimulator
from brokenithm.network import get_ip_addresses
from brokenithm.server import BrokenithmServer

for address in get_ip_addresses():
    print(f"Open http://{address}:1606/ on your device")

def show(events):
    for event in events:
        print(chr(event.key), "up" if event.up else "down")

keyboard = KeyboardSimulator(sender=show)
with BrokenithmServer(1606) as server:
    try:
        while True:
            keyboard.send(server.controller_state())
            keyboard.delay(1)
    except KeyboardInterrupt:
        pass
```

## What this package does not do

- It does not press keys on the operating system. `KeyboardSimulator` only
  produces `KeyEvent` batches; delivering them to the system is up to the
  `sender` you supply.
- It does not ship the controller web page. Put `index.html`, `config.js`,
  `app.js` and `favicon.ico` in the directory given as `root`; missing files
  are answered with 404.
- It has no command-line program; start the server from your own code as
  shown above.

## Tests

The test suite uses pytest and pytest-asyncio, available through the `test`
extra:

```
pip install .[test]
pytest
```