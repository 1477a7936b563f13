"""
# Resampling and Convolution for RGBA Images

Accipiter resizes, blurs, sharpens and convolves in-memory images. Images are
`PixelBuffer`s: rows of non-premultiplied RGBA pixels with 8 bits per channel,
backed by a numpy array. Every operation returns a new buffer and never
modifies its input. The work is split into row partitions that run in
parallel, and the result does not depend on the number of partitions.

**Dependencies** </br>
`numpy` (https://numpy.org/) </br>
`numba` (https://numba.pydata.org/) </br>
`psutil` (https://github.com/giampaolo/psutil) </br>

**Installation** </br>
```
pip install -e .
```

**Quickstart**

### Resize, fit and fill
```python
import numpy as np
import accipiter as acc

image = acc.PixelBuffer.from_array(np.random.rand(480, 640, 3))

half = acc.resize(image, 320, 240, "lanczos")
boxed = acc.fit(image, 200, 200, "catmull_rom")
square = acc.fill(image, 256, 256, anchor="top")
```

### Convolve, blur and sharpen
```python
edges = acc.convolve_3x3(
    image,
    [-1, -1, -1,
     -1,  8, -1,
     -1, -1, -1],
    edge="extend",
    absolute=True,
    preserve_alpha=True,
)
soft = acc.blur(image, 2.0)
crisp = acc.sharpen(image, 1.0)
```

### Parallelism
```python
acc.set_parallelism(4) # or set ACCIPITER_NUM_THREADS=4
```
"""

from .utils import *
from .image import *
from .resample import *
from .convolution import *

__version__ = "0.1.0"
