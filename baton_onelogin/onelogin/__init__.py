"""OneLogin API client, request parameters and response models."""