"""
model_transform_pipeline.py
Runs a sequence of transforms over the extracted enumeration models before code generation.
"""
from typing import List, Protocol, Union
from model import OtherEnum, ReprEnum

EnumModel = Union[ReprEnum, OtherEnum]

class ModelTransform(Protocol):
    def transform(self, model: EnumModel) -> EnumModel:
        ...

def run_model_transform_pipeline(
    models: List[EnumModel],
    transforms: List[ModelTransform]
) -> List[EnumModel]:
    """
    Applies every transform, in order, to each model.
    Models are independent, so each one goes through the whole chain on its own.
    """
    result = []
    for model in models:
        for transform in transforms:
            model = transform.transform(model)
        result.append(model)
    return result
