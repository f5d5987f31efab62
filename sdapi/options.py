"""Server options bag (GET/POST /options, and txt2img/img2img override_settings)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, JsonValue, SkipValidation

# Declared types document the server schema; values are passed through as received.
OptBool = SkipValidation[bool | None]
OptStr = SkipValidation[str | None]
OptNumber = SkipValidation[int | float | None]
OptStrList = SkipValidation[list[str] | None]
OptList = SkipValidation[list[JsonValue] | None]


class Options(BaseModel):
    """Every server-side tunable, passed through without validation.

    All fields default to ``None`` and are left out of the request body when
    unset. Keys the server knows about but this model does not are kept as
    extra fields and sent back unchanged.
    """

    model_config = ConfigDict(extra="allow", protected_namespaces=())

    sd_model_checkpoint: OptStr = None

    # Saving images
    samples_save: OptBool = None
    samples_format: OptStr = None
    samples_filename_pattern: OptStr = None
    save_images_add_number: OptBool = None
    grid_save: OptBool = None
    grid_format: OptStr = None
    grid_extended_filename: OptBool = None
    grid_only_if_multiple: OptBool = None
    grid_prevent_empty_spots: OptBool = None
    n_rows: OptNumber = None
    enable_pnginfo: OptBool = None
    save_txt: OptBool = None
    save_images_before_face_restoration: OptBool = None
    save_images_before_highres_fix: OptBool = None
    save_images_before_color_correction: OptBool = None
    jpeg_quality: OptNumber = None
    export_for_4chan: OptBool = None
    img_downscale_threshold: OptNumber = None
    target_side_length: OptNumber = None
    use_original_name_batch: OptBool = None
    use_upscaler_name_as_suffix: OptBool = None
    save_selected_only: OptBool = None
    do_not_add_watermark: OptBool = None

    # Temporary files
    temp_dir: OptStr = None
    clean_temp_dir_at_start: OptBool = None

    # Paths
    outdir_samples: OptStr = None
    outdir_txt2img_samples: OptStr = None
    outdir_img2img_samples: OptStr = None
    outdir_extras_samples: OptStr = None
    outdir_grids: OptStr = None
    outdir_txt2img_grids: OptStr = None
    outdir_img2img_grids: OptStr = None
    outdir_save: OptStr = None
    save_to_dirs: OptBool = None
    grid_save_to_dirs: OptBool = None
    use_save_to_dirs_for_ui: OptBool = None
    directories_filename_pattern: OptStr = None
    directories_max_prompt_words: OptNumber = None

    # Upscaling
    ESRGAN_tile: OptNumber = None
    ESRGAN_tile_overlap: OptNumber = None
    realesrgan_enabled_models: OptStrList = None
    upscaler_for_img2img: OptStr = None
    ldsr_steps: OptNumber = None
    ldsr_cached: OptBool = None
    SWIN_tile: OptNumber = None
    SWIN_tile_overlap: OptNumber = None
    face_restoration_model: OptStr = None
    code_former_weight: OptNumber = None
    face_restoration_unload: OptBool = None

    # System
    show_warnings: OptBool = None
    memmon_poll_rate: OptNumber = None
    samples_log_stdout: OptBool = None
    multiple_tqdm: OptBool = None
    print_hypernet_extra: OptBool = None

    # Training
    unload_models_when_training: OptBool = None
    pin_memory: OptBool = None
    save_optimizer_state: OptBool = None
    save_training_settings_to_txt: OptBool = None
    dataset_filename_word_regex: OptStr = None
    dataset_filename_join_string: OptStr = None
    training_image_repeats_per_epoch: OptNumber = None
    training_write_csv_every: OptNumber = None
    training_xattention_optimizations: OptBool = None
    training_enable_tensorboard: OptBool = None
    training_tensorboard_save_images: OptBool = None
    training_tensorboard_flush_every: OptNumber = None

    # Stable Diffusion
    sd_checkpoint_cache: OptNumber = None
    sd_vae_checkpoint_cache: OptNumber = None
    sd_vae: OptStr = None
    sd_vae_as_default: OptBool = None
    inpainting_mask_weight: OptNumber = None
    initial_noise_multiplier: OptNumber = None
    img2img_color_correction: OptBool = None
    img2img_fix_steps: OptBool = None
    img2img_background_color: OptStr = None
    enable_quantization: OptBool = None
    enable_emphasis: OptBool = None
    enable_batch_seeds: OptBool = None
    comma_padding_backtrack: OptNumber = None
    CLIP_stop_at_last_layers: OptNumber = None
    upcast_attn: OptBool = None
    use_old_emphasis_implementation: OptBool = None
    use_old_karras_scheduler_sigmas: OptBool = None
    no_dpmpp_sde_batch_determinism: OptBool = None
    use_old_hires_fix_width_height: OptBool = None

    # Interrogate
    interrogate_keep_models_in_memory: OptBool = None
    interrogate_return_ranks: OptBool = None
    interrogate_clip_num_beams: OptNumber = None
    interrogate_clip_min_length: OptNumber = None
    interrogate_clip_max_length: OptNumber = None
    interrogate_clip_dict_limit: OptNumber = None
    interrogate_clip_skip_categories: OptList = None
    interrogate_deepbooru_score_threshold: OptNumber = None
    deepbooru_sort_alpha: OptBool = None
    deepbooru_use_spaces: OptBool = None
    deepbooru_escape: OptBool = None
    deepbooru_filter_tags: OptStr = None

    # Extra networks
    extra_networks_default_view: OptStr = None
    extra_networks_default_multiplier: OptNumber = None
    sd_hypernetwork: OptStr = None
    sd_lora: OptStr = None
    lora_apply_to_outputs: OptBool = None

    # User interface
    return_grid: OptBool = None
    do_not_show_images: OptBool = None
    add_model_hash_to_info: OptBool = None
    add_model_name_to_info: OptBool = None
    disable_weights_auto_swap: OptBool = None
    send_seed: OptBool = None
    send_size: OptBool = None
    font: OptStr = None
    js_modal_lightbox: OptBool = None
    js_modal_lightbox_initially_zoomed: OptBool = None
    show_progress_in_title: OptBool = None
    samplers_in_dropdown: OptBool = None
    dimensions_and_batch_together: OptBool = None
    keyedit_precision_attention: OptNumber = None
    keyedit_precision_extra: OptNumber = None
    quicksettings: OptStr = None
    ui_reorder: OptStr = None
    ui_extra_networks_tab_reorder: OptStr = None
    localization: OptStr = None

    # Live previews
    show_progressbar: OptBool = None
    live_previews_enable: OptBool = None
    show_progress_grid: OptBool = None
    show_progress_every_n_steps: OptNumber = None
    show_progress_type: OptStr = None
    live_preview_content: OptStr = None
    live_preview_refresh_period: OptNumber = None
    hide_samplers: OptList = None

    # Sampler parameters
    eta_ddim: OptNumber = None
    eta_ancestral: OptNumber = None
    ddim_discretize: OptStr = None
    s_churn: OptNumber = None
    s_tmin: OptNumber = None
    s_noise: OptNumber = None
    eta_noise_seed_delta: OptNumber = None
    always_discard_next_to_last_sigma: OptBool = None

    # Postprocessing
    postprocessing_enable_in_main_ui: OptList = None
    postprocessing_operation_order: OptList = None
    upscaling_max_images_in_cache: OptNumber = None
    disabled_extensions: OptList = None
    sd_checkpoint_hash: OptStr = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True, warnings=False)
