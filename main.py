import sys

from app.run_pointcloud_stream import main

if __name__ == "__main__":
    sys.exit(main())
