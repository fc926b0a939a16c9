from change_detection.main import entrypoint

entrypoint()
